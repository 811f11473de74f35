"""Activity log service.

Activities are written once, when a rating or review is first created,
and only ever read afterwards. Emission happens inside the caller's
transaction; projection catches up on content whose emission failed.
"""
import logging
from datetime import datetime
from typing import Optional, List, Union

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.models.activity import Activity, ActivityType
from app.models.rating import Rating
from app.models.review import Review
from app.schemas.activity import RatingPayload, ReviewPayload

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for recording and counting feed activities."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        user_id: Optional[int],
        album_id: int,
        source_id: int,
        payload: Union[RatingPayload, ReviewPayload],
        created_at: Optional[datetime] = None,
    ) -> Activity:
        """Append an activity. Flushes but does not commit."""
        activity = Activity(
            user_id=user_id,
            type=payload.type,
            album_id=album_id,
            source_id=source_id,
            data=payload.model_dump(),
        )
        if created_at is not None:
            activity.created_at = created_at
        self.db.add(activity)
        self.db.flush()
        return activity

    def emit_rating(self, rating: Rating, created_at: Optional[datetime] = None) -> Activity:
        """Record the activity for a newly created rating."""
        return self.record(
            user_id=rating.user_id,
            album_id=rating.album_id,
            source_id=rating.id,
            payload=RatingPayload(rating=rating.rating),
            created_at=created_at,
        )

    def emit_review(self, review: Review, created_at: Optional[datetime] = None) -> Activity:
        """Record the activity for a newly created review."""
        return self.record(
            user_id=review.user_id,
            album_id=review.album_id,
            source_id=review.id,
            payload=ReviewPayload(content=review.content),
            created_at=created_at,
        )

    def find_for_source(self, activity_type: ActivityType, source_id: int) -> Optional[Activity]:
        """Get the activity emitted for a rating/review row, if any."""
        return self.db.scalar(
            select(Activity).where(
                Activity.type == activity_type.value,
                Activity.source_id == source_id,
            )
        )

    def count_for_user(self, user_id: int) -> int:
        """Number of activities authored by a user."""
        return self.db.scalar(
            select(func.count(Activity.id)).where(Activity.user_id == user_id)
        ) or 0

    def has_activity(self, user_id: int) -> bool:
        """Check if a user has any activity (for empty state handling)."""
        return self.count_for_user(user_id) > 0

    def project_missing(self) -> dict:
        """Emit activities for authored ratings/reviews that have none.

        Covers content whose emission failed at write time. Safe to rerun:
        rows that already have an activity are skipped. The payload reflects
        the content as it is now; the timestamp is the content's creation
        time so the entry lands where it would have. Commits.
        """
        projected = {"rating": 0, "review": 0}

        missing_ratings = self._missing(Rating, ActivityType.RATING)
        for rating in missing_ratings:
            self.emit_rating(rating, created_at=rating.created_at)
            projected["rating"] += 1

        missing_reviews = self._missing(Review, ActivityType.REVIEW)
        for review in missing_reviews:
            self.emit_review(review, created_at=review.created_at)
            projected["review"] += 1

        self.db.commit()

        if projected["rating"] or projected["review"]:
            logger.info(
                f"Projected {projected['rating']} rating and "
                f"{projected['review']} review activities"
            )
        return projected

    def _missing(self, model, activity_type: ActivityType) -> List:
        has_activity = (
            select(Activity.id)
            .where(Activity.type == activity_type.value, Activity.source_id == model.id)
            .exists()
        )
        return list(
            self.db.scalars(
                select(model)
                .where(model.user_id.is_not(None), ~has_activity)
                .order_by(model.created_at, model.id)
            )
        )
