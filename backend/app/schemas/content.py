"""Rating and review schemas."""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

from app.schemas.user import UserBrief


class RatingCreate(BaseModel):
    """Create or update a rating."""
    model_config = ConfigDict(populate_by_name=True)

    album_id: int = Field(..., alias="albumId")
    rating: int = Field(..., description="Whole stars, 1 to 5")


class RatingResponse(BaseModel):
    """Rating response. user is None for anonymized ratings."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    album_id: int
    rating: int
    user: Optional[UserBrief] = None
    created_at: datetime
    updated_at: datetime


class ReviewCreate(BaseModel):
    """Create or update a review. Content rules are enforced by ReviewService."""
    model_config = ConfigDict(populate_by_name=True)

    album_id: int = Field(..., alias="albumId")
    content: str


class ReviewUpdate(BaseModel):
    """Edit review content."""
    content: str


class ReviewResponse(BaseModel):
    """Review response. user is None for anonymized reviews."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    album_id: int
    content: str
    user: Optional[UserBrief] = None
    created_at: datetime
    updated_at: datetime
