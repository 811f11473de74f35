"""Shared upsert/read/delete flow for per-(user, album) content.

Ratings and reviews follow the same rules: one row per (user, album),
repeat submissions update in place, and only the first creation emits
an activity. Subclasses supply the model, the value column and the
activity emitter.
"""
import logging
from typing import Any, List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.exceptions import NotFoundError, PermissionDeniedError
from app.models.album import Album
from app.models.user import User
from app.services.activity import ActivityService
from app.services.persistence import PersistenceExecutor, IntegrityCheck

logger = logging.getLogger(__name__)


class AuthoredContentService:
    """Base class for RatingService and ReviewService."""

    model: Any = None
    value_field: str = ""
    label: str = ""

    def __init__(
        self,
        db: Session,
        executor: Optional[PersistenceExecutor] = None,
        activity: Optional[ActivityService] = None,
    ):
        self.db = db
        self.executor = executor or PersistenceExecutor(db)
        self.activity = activity or ActivityService(db)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def validate(self, value):
        """Return the normalized value or raise a ValidationError."""
        raise NotImplementedError

    def emit_activity(self, row):
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, user_id: int, album_id: int, value):
        """Create the row for (user, album), or update it in place."""
        value = self.validate(value)

        existing = self.get_for_user_and_album(user_id, album_id)
        if existing:
            return self._update(existing, value)
        return self.create_first_time(user_id, album_id, value)

    def create_first_time(self, user_id: int, album_id: int, value):
        """Insert the row and emit its activity in one transaction.

        Activity emission is best-effort: it runs in a savepoint and a
        failure is logged, leaving the row for ActivityService.project_missing.
        If a concurrent request inserted the same (user, album) first, this
        becomes an update and emits nothing.
        """
        value = self.validate(value)

        self.executor.check_referential_integrity([
            IntegrityCheck(User, user_id, "User"),
            IntegrityCheck(Album, album_id, "Album"),
        ])

        def create(db: Session):
            row = self.model(user_id=user_id, album_id=album_id, **{self.value_field: value})
            try:
                with db.begin_nested():
                    db.add(row)
                    db.flush()
            except IntegrityError:
                existing = self.get_for_user_and_album(user_id, album_id)
                if existing is None:
                    raise
                logger.info(
                    f"Concurrent {self.label} for user {user_id} album {album_id}, updating instead"
                )
                setattr(existing, self.value_field, value)
                db.flush()
                return existing

            self._emit_best_effort(db, row)
            logger.info(f"Created {self.label} {row.id} for user {user_id} album {album_id}")
            return row

        return self.executor.run(
            create,
            validation=select(self.model.id).where(
                self.model.user_id == user_id,
                self.model.album_id == album_id,
            ),
        )

    def delete(self, user_id: int, album_id: int) -> bool:
        """Delete a user's row for an album. Its activity is kept."""
        row = self.get_for_user_and_album(user_id, album_id)
        if not row:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        return self._delete(row)

    def delete_by_id(self, row_id: int, user_id: int) -> bool:
        """Delete a row by id, only by its author."""
        row = self._require_owned(row_id, user_id)
        return self._delete(row)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, row_id: int):
        """Get a row by id."""
        return self.db.get(self.model, row_id)

    def get_for_user_and_album(self, user_id: int, album_id: int):
        """Get the row a user wrote for an album."""
        return self.db.scalar(
            select(self.model).where(
                self.model.user_id == user_id,
                self.model.album_id == album_id,
            )
        )

    def for_album(self, album_id: int) -> List:
        """All rows for an album, newest first, authors loaded."""
        return list(
            self.db.scalars(
                select(self.model)
                .options(joinedload(self.model.user))
                .where(self.model.album_id == album_id)
                .order_by(self.model.created_at.desc(), self.model.id.desc())
            )
        )

    def for_user(self, user_id: int) -> List:
        """All rows written by a user, newest first, albums loaded."""
        return list(
            self.db.scalars(
                select(self.model)
                .options(joinedload(self.model.album))
                .where(self.model.user_id == user_id)
                .order_by(self.model.created_at.desc(), self.model.id.desc())
            )
        )

    def count_for_album(self, album_id: int) -> int:
        """Number of rows for an album, anonymized ones included."""
        return self.db.scalar(
            select(func.count(self.model.id)).where(self.model.album_id == album_id)
        ) or 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update(self, row, value):
        def apply(db: Session):
            setattr(row, self.value_field, value)
            db.flush()
            return row

        return self.executor.run(apply)

    def _delete(self, row) -> bool:
        def remove(db: Session) -> bool:
            db.delete(row)
            db.flush()
            return True

        return self.executor.run(remove)

    def _require_owned(self, row_id: int, user_id: int):
        row = self.get(row_id)
        if not row:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        if row.user_id != user_id:
            raise PermissionDeniedError(f"You can only modify your own {self.label}s")
        return row

    def _emit_best_effort(self, db: Session, row) -> None:
        try:
            with db.begin_nested():
                self.emit_activity(row)
        except Exception:
            logger.exception(f"Failed to create {self.label} activity for {self.label} {row.id}")
