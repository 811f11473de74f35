"""Activity feed service.

Feeds are computed on read: the viewer's follow edges are joined against
the activity log at query time, nothing is precomputed per viewer.
Ordering is (created_at, id) descending so equal timestamps still page
deterministically.
"""
from typing import Optional

from sqlalchemy import select, and_, or_
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.exceptions import ValidationError, NotFoundError
from app.models.activity import Activity, ActivityType
from app.models.user import User
from app.schemas.activity import (
    ActivityStats,
    EmptyFeedReason,
    FeedCursor,
    FeedItem,
    FeedPage,
    parse_payload,
)
from app.schemas.album import AlbumBrief
from app.schemas.user import UserBrief
from app.services.activity import ActivityService
from app.services.social import SocialService


class FeedService:
    """Paginated feeds over the activity log."""

    def __init__(
        self,
        db: Session,
        social: Optional[SocialService] = None,
        activity: Optional[ActivityService] = None,
    ):
        self.db = db
        self.social = social or SocialService(db)
        self.activity = activity or ActivityService(db)

    def feed(
        self,
        viewer_id: int,
        page: int = 1,
        limit: Optional[int] = None,
        before: Optional[str] = None,
    ) -> FeedPage:
        """Activities of everyone the viewer follows, newest first."""
        limit = self._check_paging(page, limit)

        followee_ids = self.social.following_ids(viewer_id)
        if not followee_ids:
            return FeedPage.empty(page, limit, EmptyFeedReason.NOT_FOLLOWING)

        query = select(Activity).where(Activity.user_id.in_(followee_ids))
        return self._page(query, page, limit, before)

    def user_feed(
        self,
        target_user_id: int,
        page: int = 1,
        limit: Optional[int] = None,
        before: Optional[str] = None,
    ) -> FeedPage:
        """Public activity of a single user."""
        limit = self._check_paging(page, limit)
        query = select(Activity).where(Activity.user_id == target_user_id)
        return self._page(query, page, limit, before)

    def recent(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        activity_type: Optional[ActivityType] = None,
    ) -> FeedPage:
        """Discovery feed across all users, anonymized activity included."""
        limit = self._check_paging(page, limit)
        query = select(Activity)
        if activity_type is not None:
            query = query.where(Activity.type == ActivityType(activity_type).value)
        return self._page(query, page, limit, None)

    def stats(self, user_id: int) -> ActivityStats:
        """Activity count for a user."""
        if not self.db.get(User, user_id):
            raise NotFoundError("User not found")
        count = self.activity.count_for_user(user_id)
        return ActivityStats(user_id=user_id, activity_count=count, has_activity=count > 0)

    def _page(self, query, page: int, limit: int, before: Optional[str]) -> FeedPage:
        query = query.options(joinedload(Activity.user), joinedload(Activity.album)).order_by(
            Activity.created_at.desc(), Activity.id.desc()
        )

        if before:
            cursor = FeedCursor.decode(before)
            query = query.where(
                or_(
                    Activity.created_at < cursor.created_at,
                    and_(Activity.created_at == cursor.created_at, Activity.id < cursor.id),
                )
            )
        else:
            query = query.offset((page - 1) * limit)

        # One extra row tells us whether another page exists
        rows = list(self.db.scalars(query.limit(limit + 1)).unique())
        has_more = len(rows) > limit
        rows = rows[:limit]

        if not rows:
            return FeedPage.empty(page, limit, EmptyFeedReason.NO_ACTIVITY)

        items = [self._to_item(a) for a in rows]
        next_cursor = None
        if has_more:
            last = rows[-1]
            next_cursor = FeedCursor(created_at=last.created_at, id=last.id).encode()

        return FeedPage(
            items=items,
            page=page,
            limit=limit,
            has_more=has_more,
            next_cursor=next_cursor,
        )

    def _to_item(self, activity: Activity) -> FeedItem:
        return FeedItem(
            id=activity.id,
            type=activity.type,
            user_id=activity.user_id,
            user=UserBrief.model_validate(activity.user) if activity.user else None,
            album_id=activity.album_id,
            album=AlbumBrief.model_validate(activity.album),
            data=parse_payload(activity.data),
            created_at=activity.created_at,
        )

    def _check_paging(self, page: int, limit: Optional[int]) -> int:
        if limit is None:
            limit = settings.feed_default_limit
        if page < 1:
            raise ValidationError("Page must be a positive integer")
        if limit < 1 or limit > settings.feed_max_limit:
            raise ValidationError(f"Limit must be between 1 and {settings.feed_max_limit}")
        return limit

