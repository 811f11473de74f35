"""Follow graph and user discovery endpoints."""
from typing import List
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.services.social import SocialService
from app.schemas.user import UserBrief, UserProfile
from app.schemas.common import MessageResponse
from app.models.user import User

router = APIRouter()


class FollowRequest(BaseModel):
    """Follow request body."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")


@router.post("/follow", response_model=MessageResponse, status_code=201)
def follow(
    request: FollowRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Follow another user."""
    SocialService(db).follow(user.id, request.user_id)
    return MessageResponse(message="Followed")


@router.delete("/follow/{user_id}", response_model=MessageResponse)
def unfollow(
    user_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Stop following a user."""
    SocialService(db).unfollow(user.id, user_id)
    return MessageResponse(message="Unfollowed")


@router.get("/followers/{user_id}", response_model=List[UserBrief])
def followers(user_id: int, db: Session = Depends(get_db)):
    """Users following user_id."""
    return [UserBrief.model_validate(u) for u in SocialService(db).followers(user_id)]


@router.get("/following/{user_id}", response_model=List[UserBrief])
def following(user_id: int, db: Session = Depends(get_db)):
    """Users that user_id follows."""
    return [UserBrief.model_validate(u) for u in SocialService(db).following(user_id)]


@router.get("/profile/{user_id}", response_model=UserProfile)
def profile(user_id: int, db: Session = Depends(get_db)):
    """Public profile with follower/following counts."""
    return SocialService(db).profile(user_id)


@router.get("/is-following/{user_id}")
def is_following(
    user_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Check whether the current user follows user_id."""
    return {"is_following": SocialService(db).is_following(user.id, user_id)}


@router.get("/mutual/{user_id}", response_model=List[UserBrief])
def mutual(user_id: int, db: Session = Depends(get_db)):
    """Users who follow user_id and are followed back."""
    return [UserBrief.model_validate(u) for u in SocialService(db).mutual_follows(user_id)]


@router.get("/search", response_model=List[UserBrief])
def search(
    q: str = Query("", max_length=100),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Find users by username."""
    return [UserBrief.model_validate(u) for u in SocialService(db).search_users(q, limit)]
