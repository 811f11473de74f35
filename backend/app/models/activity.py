"""Activity log model."""
import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import utcnow


class ActivityType(str, enum.Enum):
    """Kinds of content that show up in feeds."""
    RATING = "rating"
    REVIEW = "review"


class Activity(Base):
    """Append-only feed entry emitted when a rating or review is first created."""

    __tablename__ = "activities"
    __table_args__ = (
        # One activity per originating rating/review row
        UniqueConstraint("type", "source_id", name="uq_activities_type_source"),
        Index("ix_activities_user_created", "user_id", "created_at", "id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    type = Column(String(20), nullable=False, index=True)  # rating, review
    album_id = Column(Integer, ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True)
    source_id = Column(Integer, nullable=False)  # ratings.id or reviews.id, no FK: content may be deleted
    data = Column(JSON, nullable=False)  # RatingPayload / ReviewPayload dump (JSON for SQLite compat)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    user = relationship("User")
    album = relationship("Album")

    def __repr__(self):
        return f"<Activity {self.type} by user {self.user_id}>"
