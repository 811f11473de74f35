"""Review model."""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import utcnow


class Review(Base):
    """Written review of an album. Content is stored trimmed."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "album_id", name="uq_reviews_user_album"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    album_id = Column(Integer, ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User")
    album = relationship("Album")

    def __repr__(self):
        return f"<Review {self.id} for album {self.album_id} by user {self.user_id}>"
