"""Pydantic schemas for API request/response validation."""
from app.schemas.user import (
    UserCreate,
    UserResponse,
    UserBrief,
    UserProfile,
    UserLogin,
    LoginResponse,
)
from app.schemas.album import (
    CatalogAlbum,
    AlbumBrief,
    AlbumResponse,
    AlbumStats,
    AlbumDetailResponse,
)
from app.schemas.content import (
    RatingCreate,
    RatingResponse,
    ReviewCreate,
    ReviewUpdate,
    ReviewResponse,
)
from app.schemas.activity import (
    RatingPayload,
    ReviewPayload,
    FeedItem,
    FeedPage,
    FeedCursor,
    EmptyFeedReason,
    ActivityStats,
)
from app.schemas.common import MessageResponse

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserBrief",
    "UserProfile",
    "UserLogin",
    "LoginResponse",
    "CatalogAlbum",
    "AlbumBrief",
    "AlbumResponse",
    "AlbumStats",
    "AlbumDetailResponse",
    "RatingCreate",
    "RatingResponse",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "RatingPayload",
    "ReviewPayload",
    "FeedItem",
    "FeedPage",
    "FeedCursor",
    "EmptyFeedReason",
    "ActivityStats",
    "MessageResponse",
]
