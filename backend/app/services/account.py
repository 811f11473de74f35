"""Account deletion workflow.

Deleting an account removes the identity and its follow edges but keeps
everything the user wrote, with the author cleared, so album averages
and other users' feed history do not change.

Stages run in order inside one transaction:

    ACTIVE -> AUDIT_WRITTEN -> CONTENT_ANONYMIZED -> EDGES_REMOVED
           -> IDENTITY_REMOVED -> TERMINAL

A failure at any stage rolls the whole transaction back and the account
stays ACTIVE. Revoking sessions happens after commit and cannot undo
the deletion.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

import redis
from sqlalchemy import select, func, update, delete, or_
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models.activity import Activity
from app.models.deletion_audit import DeletionAudit
from app.models.follow import Follow
from app.models.rating import Rating
from app.models.review import Review
from app.models.user import User
from app.services.persistence import PersistenceExecutor
from app.services.sessions import SessionStore

logger = logging.getLogger(__name__)


class DeletionStage(str, enum.Enum):
    """Progress of an account deletion."""
    ACTIVE = "active"
    AUDIT_WRITTEN = "audit_written"
    CONTENT_ANONYMIZED = "content_anonymized"
    EDGES_REMOVED = "edges_removed"
    IDENTITY_REMOVED = "identity_removed"
    TERMINAL = "terminal"


@dataclass
class AccountDeletionResult:
    """Outcome of a completed deletion."""
    user_id: int
    audit_id: int
    ratings_count: int
    reviews_count: int
    follows_count: int
    stage: DeletionStage
    sessions_revoked: Optional[int] = None


class AccountDeletionService:
    """Deletes an account while preserving its content anonymously."""

    def __init__(
        self,
        db: Session,
        executor: Optional[PersistenceExecutor] = None,
        sessions: Optional[SessionStore] = None,
    ):
        self.db = db
        self.executor = executor or PersistenceExecutor(db)
        self.sessions = sessions
        self.stage = DeletionStage.ACTIVE

    def delete_account(self, user_id: int) -> AccountDeletionResult:
        """Run the deletion. Raises NotFoundError for an unknown user."""
        if not self.db.get(User, user_id):
            raise NotFoundError("User not found")

        self.stage = DeletionStage.ACTIVE
        try:
            audit = self.executor.run(
                lambda db: self._delete_in_transaction(db, user_id),
                validation=select(DeletionAudit.id).where(DeletionAudit.user_id == user_id),
            )
        except Exception:
            logger.exception(f"Account deletion for user {user_id} failed at stage {self.stage.value}, rolled back")
            self.stage = DeletionStage.ACTIVE
            raise

        result = AccountDeletionResult(
            user_id=user_id,
            audit_id=audit.id,
            ratings_count=audit.ratings_count,
            reviews_count=audit.reviews_count,
            follows_count=audit.follows_count,
            stage=self.stage,
        )
        result.sessions_revoked = self._revoke_sessions(user_id)

        self._advance(DeletionStage.TERMINAL, user_id)
        result.stage = self.stage
        return result

    def _delete_in_transaction(self, db: Session, user_id: int) -> DeletionAudit:
        audit = self._write_audit(db, user_id)
        self._advance(DeletionStage.AUDIT_WRITTEN, user_id)

        self._anonymize_content(db, user_id)
        self._advance(DeletionStage.CONTENT_ANONYMIZED, user_id)

        self._remove_edges(db, user_id)
        self._advance(DeletionStage.EDGES_REMOVED, user_id)

        self._remove_identity(db, user_id)
        self._advance(DeletionStage.IDENTITY_REMOVED, user_id)

        return audit

    def _write_audit(self, db: Session, user_id: int) -> DeletionAudit:
        audit = DeletionAudit(
            user_id=user_id,
            ratings_count=self._count(db, Rating, Rating.user_id == user_id),
            reviews_count=self._count(db, Review, Review.user_id == user_id),
            follows_count=self._count(
                db, Follow, or_(Follow.follower_id == user_id, Follow.followee_id == user_id)
            ),
        )
        db.add(audit)
        db.flush()
        return audit

    def _anonymize_content(self, db: Session, user_id: int) -> None:
        for model in (Rating, Review, Activity):
            db.execute(
                update(model)
                .where(model.user_id == user_id)
                .values(user_id=None)
                .execution_options(synchronize_session=False)
            )

    def _remove_edges(self, db: Session, user_id: int) -> None:
        db.execute(
            delete(Follow)
            .where(or_(Follow.follower_id == user_id, Follow.followee_id == user_id))
            .execution_options(synchronize_session=False)
        )

    def _remove_identity(self, db: Session, user_id: int) -> None:
        result = db.execute(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            raise NotFoundError("User not found")

    def _revoke_sessions(self, user_id: int) -> Optional[int]:
        if self.sessions is None:
            return None
        try:
            return self.sessions.revoke_all(user_id)
        except redis.RedisError as e:
            logger.warning(f"Could not revoke sessions for deleted user {user_id}: {e}")
            return None

    def _advance(self, stage: DeletionStage, user_id: int) -> None:
        self.stage = stage
        logger.info(f"Account deletion for user {user_id}: {stage.value}")

    @staticmethod
    def _count(db: Session, model, condition) -> int:
        return db.scalar(select(func.count(model.id)).where(condition)) or 0
