"""Account deletion audit model."""
from sqlalchemy import Column, Integer, DateTime
from app.database import Base
from app.models.base import utcnow


class DeletionAudit(Base):
    """Write-once snapshot of what an account owned when it was deleted."""

    __tablename__ = "account_deletion_audit"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)  # no FK: the user row is gone
    deleted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    ratings_count = Column(Integer, nullable=False, default=0)
    reviews_count = Column(Integer, nullable=False, default=0)
    follows_count = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<DeletionAudit user {self.user_id}>"
