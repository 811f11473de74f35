"""Business logic services."""
from app.services.auth import AuthService
from app.services.sessions import SessionStore
from app.services.persistence import PersistenceExecutor, IntegrityCheck
from app.services.social import SocialService
from app.services.activity import ActivityService
from app.services.ratings import RatingService
from app.services.reviews import ReviewService
from app.services.feed import FeedService
from app.services.albums import AlbumService
from app.services.account import AccountDeletionService, DeletionStage

__all__ = [
    "AuthService",
    "SessionStore",
    "PersistenceExecutor",
    "IntegrityCheck",
    "SocialService",
    "ActivityService",
    "RatingService",
    "ReviewService",
    "FeedService",
    "AlbumService",
    "AccountDeletionService",
    "DeletionStage",
]
