"""Album review endpoints."""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.services.reviews import ReviewService
from app.schemas.content import ReviewCreate, ReviewUpdate, ReviewResponse
from app.schemas.common import MessageResponse
from app.models.user import User

router = APIRouter()


@router.post("", response_model=ReviewResponse)
def write_review(
    request: ReviewCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Review an album. Reviewing it again replaces the previous text."""
    review = ReviewService(db).upsert(user.id, request.album_id, request.content)
    return ReviewResponse.model_validate(review)


@router.get("/recent", response_model=List[ReviewResponse])
def recent_reviews(
    limit: int = Query(6, ge=1, le=50),
    db: Session = Depends(get_db),
):
    """Latest reviews across all users."""
    return [ReviewResponse.model_validate(r) for r in ReviewService(db).recent(limit)]


@router.get("/user/{user_id}", response_model=List[ReviewResponse])
def user_reviews(user_id: int, db: Session = Depends(get_db)):
    """All reviews by a user, newest first."""
    return [ReviewResponse.model_validate(r) for r in ReviewService(db).for_user(user_id)]


@router.put("/{review_id}", response_model=ReviewResponse)
def edit_review(
    review_id: int,
    request: ReviewUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Edit one of your reviews."""
    review = ReviewService(db).update(review_id, user.id, request.content)
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete one of your reviews."""
    ReviewService(db).delete_by_id(review_id, user.id)
    return MessageResponse(message="Review deleted")
