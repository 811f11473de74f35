"""Album rating endpoints."""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.services.ratings import RatingService
from app.schemas.content import RatingCreate, RatingResponse
from app.schemas.common import MessageResponse
from app.models.user import User

router = APIRouter()


@router.post("", response_model=RatingResponse)
def rate_album(
    request: RatingCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Rate an album. Rating it again replaces the previous value."""
    rating = RatingService(db).upsert(user.id, request.album_id, request.rating)
    return RatingResponse.model_validate(rating)


@router.get("/user/{user_id}", response_model=List[RatingResponse])
def user_ratings(user_id: int, db: Session = Depends(get_db)):
    """All ratings by a user, newest first."""
    return [RatingResponse.model_validate(r) for r in RatingService(db).for_user(user_id)]


@router.delete("/{rating_id}", response_model=MessageResponse)
def delete_rating(
    rating_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete one of your ratings."""
    RatingService(db).delete_by_id(rating_id, user.id)
    return MessageResponse(message="Rating deleted")
