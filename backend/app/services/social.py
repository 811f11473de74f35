"""Social graph service: directed follow edges between users."""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.exceptions import (
    AlreadyFollowingError,
    NotFollowingError,
    NotFoundError,
    SelfFollowError,
)
from app.models.follow import Follow
from app.models.user import User
from app.schemas.user import UserProfile
from app.services.persistence import PersistenceExecutor, IntegrityCheck

logger = logging.getLogger(__name__)


class SocialService:
    """Follow/unfollow plus graph lookups.

    Counts are computed from the edge table on every call.
    """

    def __init__(self, db: Session, executor: Optional[PersistenceExecutor] = None):
        self.db = db
        self.executor = executor or PersistenceExecutor(db)

    def follow(self, follower_id: int, followee_id: int) -> Follow:
        """Create the edge follower -> followee."""
        if follower_id == followee_id:
            raise SelfFollowError()

        self.executor.check_referential_integrity([
            IntegrityCheck(User, follower_id, "Follower"),
            IntegrityCheck(User, followee_id, "User to follow"),
        ])

        def create_edge(db: Session) -> Follow:
            if self.is_following(follower_id, followee_id):
                raise AlreadyFollowingError()
            edge = Follow(follower_id=follower_id, followee_id=followee_id)
            db.add(edge)
            try:
                db.flush()
            except IntegrityError as e:
                # Lost a race against a concurrent follow of the same pair
                raise AlreadyFollowingError() from e
            return edge

        edge = self.executor.run(
            create_edge,
            validation=select(Follow.id).where(
                Follow.follower_id == follower_id,
                Follow.followee_id == followee_id,
            ),
        )
        logger.info(f"User {follower_id} followed user {followee_id}")
        return edge

    def unfollow(self, follower_id: int, followee_id: int) -> bool:
        """Remove the edge follower -> followee."""

        def remove_edge(db: Session) -> bool:
            result = db.execute(
                delete(Follow).where(
                    Follow.follower_id == follower_id,
                    Follow.followee_id == followee_id,
                )
            )
            if result.rowcount == 0:
                raise NotFollowingError()
            return True

        removed = self.executor.run(remove_edge)
        logger.info(f"User {follower_id} unfollowed user {followee_id}")
        return removed

    def is_following(self, follower_id: int, followee_id: int) -> bool:
        """Check if one user follows another."""
        return self.executor.exists(Follow, follower_id=follower_id, followee_id=followee_id)

    def is_following_many(self, follower_id: int, followee_ids: Iterable[int]) -> Dict[int, bool]:
        """Batch version of is_following."""
        followee_ids = list(followee_ids)
        if not followee_ids:
            return {}

        followed = set(
            self.db.scalars(
                select(Follow.followee_id).where(
                    Follow.follower_id == follower_id,
                    Follow.followee_id.in_(followee_ids),
                )
            )
        )
        return {user_id: user_id in followed for user_id in followee_ids}

    def followers(self, user_id: int) -> List[User]:
        """Users following user_id, most recent follow first."""
        self._require_user(user_id)
        return list(
            self.db.scalars(
                select(User)
                .join(Follow, Follow.follower_id == User.id)
                .where(Follow.followee_id == user_id)
                .order_by(Follow.created_at.desc(), Follow.id.desc())
            )
        )

    def following(self, user_id: int) -> List[User]:
        """Users that user_id follows, most recent follow first."""
        self._require_user(user_id)
        return list(
            self.db.scalars(
                select(User)
                .join(Follow, Follow.followee_id == User.id)
                .where(Follow.follower_id == user_id)
                .order_by(Follow.created_at.desc(), Follow.id.desc())
            )
        )

    def following_ids(self, user_id: int) -> List[int]:
        """Ids of the users that user_id follows."""
        return list(
            self.db.scalars(select(Follow.followee_id).where(Follow.follower_id == user_id))
        )

    def follower_count(self, user_id: int) -> int:
        """Get follower count for a user."""
        return self.db.scalar(
            select(func.count(Follow.id)).where(Follow.followee_id == user_id)
        ) or 0

    def following_count(self, user_id: int) -> int:
        """Get following count for a user."""
        return self.db.scalar(
            select(func.count(Follow.id)).where(Follow.follower_id == user_id)
        ) or 0

    def mutual_follows(self, user_id: int) -> List[User]:
        """Users who follow user_id and are followed back."""
        self._require_user(user_id)
        back = aliased(Follow)
        return list(
            self.db.scalars(
                select(User)
                .join(Follow, Follow.followee_id == User.id)
                .join(
                    back,
                    (back.follower_id == Follow.followee_id) & (back.followee_id == Follow.follower_id),
                )
                .where(Follow.follower_id == user_id)
                .order_by(User.username)
            )
        )

    def profile(self, user_id: int) -> UserProfile:
        """Get user profile with social stats."""
        user = self._require_user(user_id)
        return UserProfile(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            follower_count=self.follower_count(user_id),
            following_count=self.following_count(user_id),
        )

    def search_users(self, query: str, limit: int = 20) -> List[User]:
        """Case-insensitive username substring match, alphabetical."""
        query = (query or "").strip()
        if not query:
            return []
        return list(
            self.db.scalars(
                select(User)
                .where(User.username.ilike(f"%{query}%"))
                .order_by(User.username)
                .limit(limit)
            )
        )

    def _require_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user
