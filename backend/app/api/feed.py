"""Activity feed endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user
from app.models.activity import ActivityType
from app.services.feed import FeedService
from app.schemas.activity import FeedPage, ActivityStats
from app.models.user import User

router = APIRouter()


@router.get("", response_model=FeedPage)
def get_feed(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    before: Optional[str] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Activities from everyone the current user follows."""
    return FeedService(db).feed(user.id, page=page, limit=limit, before=before)


@router.get("/recent", response_model=FeedPage)
def recent_activity(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    type: Optional[ActivityType] = None,
    db: Session = Depends(get_db),
):
    """Latest activity across all users."""
    return FeedService(db).recent(page=page, limit=limit, activity_type=type)


@router.get("/user/{user_id}", response_model=FeedPage)
def user_feed(
    user_id: int,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    before: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Activity of a single user."""
    return FeedService(db).user_feed(user_id, page=page, limit=limit, before=before)


@router.get("/stats/{user_id}", response_model=ActivityStats)
def activity_stats(user_id: int, db: Session = Depends(get_db)):
    """Activity count for a user."""
    return FeedService(db).stats(user_id)
