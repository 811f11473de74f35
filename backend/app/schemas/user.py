"""User schemas."""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
from typing import Optional


class UserBase(BaseModel):
    """Base user fields."""
    username: str


class UserCreate(UserBase):
    """Registration request."""
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(..., min_length=8)


class UserResponse(UserBase):
    """User response. Email is only shown to the owner."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class UserBrief(BaseModel):
    """Author info embedded in ratings, reviews and feed items."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    avatar_url: Optional[str] = None


class UserProfile(UserResponse):
    """Public profile with social stats."""
    follower_count: int = 0
    following_count: int = 0


class UserLogin(BaseModel):
    """Login request."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Login response with token."""
    token: str
    user: UserResponse
