"""Album review service."""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.exceptions import ValidationError, EmptyReviewError, ReviewTooLongError
from app.models.review import Review
from app.services.activity import ActivityService
from app.services.content import AuthoredContentService
from app.services.persistence import PersistenceExecutor


class ReviewService(AuthoredContentService):
    """Create/update/delete reviews.

    Content is trimmed before it is validated and stored.
    """

    model = Review
    value_field = "content"
    label = "review"

    def __init__(
        self,
        db: Session,
        executor: Optional[PersistenceExecutor] = None,
        activity: Optional[ActivityService] = None,
        max_length: Optional[int] = None,
    ):
        super().__init__(db, executor=executor, activity=activity)
        if max_length is None:
            max_length = settings.review_max_length
        self.max_length = max_length

    def validate(self, value) -> str:
        if value is None or not isinstance(value, str):
            raise ValidationError("Review content is required")
        content = value.strip()
        if not content:
            raise EmptyReviewError()
        if len(content) > self.max_length:
            raise ReviewTooLongError(
                f"Review content cannot exceed {self.max_length} characters"
            )
        return content

    def emit_activity(self, row: Review):
        return self.activity.emit_review(row)

    def update(self, review_id: int, user_id: int, content: str) -> Review:
        """Edit a review by id. Only the author may edit; the activity is untouched."""
        content = self.validate(content)
        review = self._require_owned(review_id, user_id)
        return self._update(review, content)

    def recent(self, limit: int = 6) -> List[Review]:
        """Most recent reviews across all users, for the home page."""
        return list(
            self.db.scalars(
                select(Review)
                .options(joinedload(Review.user), joinedload(Review.album))
                .order_by(Review.created_at.desc(), Review.id.desc())
                .limit(limit)
            )
        )
