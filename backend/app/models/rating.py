"""Rating model."""
from sqlalchemy import Column, Integer, SmallInteger, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import utcnow

MIN_RATING = 1
MAX_RATING = 5


class Rating(Base):
    """Star rating of an album. user_id is cleared when the author deletes their account."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "album_id", name="uq_ratings_user_album"),
        CheckConstraint(f"rating BETWEEN {MIN_RATING} AND {MAX_RATING}", name="ck_ratings_range"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    album_id = Column(Integer, ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(SmallInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User")
    album = relationship("Album")

    def __repr__(self):
        return f"<Rating {self.rating} for album {self.album_id} by user {self.user_id}>"
