"""SQLAlchemy models for Needledrop."""
from app.models.user import User
from app.models.follow import Follow
from app.models.album import Album
from app.models.rating import Rating
from app.models.review import Review
from app.models.activity import Activity, ActivityType
from app.models.deletion_audit import DeletionAudit

__all__ = [
    "User",
    "Follow",
    "Album",
    "Rating",
    "Review",
    "Activity",
    "ActivityType",
    "DeletionAudit",
]
