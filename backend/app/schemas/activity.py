"""Activity payload and feed schemas."""
import base64
import binascii
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from app.exceptions import ValidationError
from app.schemas.album import AlbumBrief
from app.schemas.user import UserBrief


class RatingPayload(BaseModel):
    """Payload of a rating activity."""
    type: Literal["rating"] = "rating"
    rating: int


class ReviewPayload(BaseModel):
    """Payload of a review activity."""
    type: Literal["review"] = "review"
    content: str


ActivityPayload = Annotated[Union[RatingPayload, ReviewPayload], Field(discriminator="type")]

payload_adapter = TypeAdapter(ActivityPayload)


def parse_payload(data: dict) -> Union[RatingPayload, ReviewPayload]:
    """Validate a stored activity blob into its typed payload."""
    return payload_adapter.validate_python(data)


class FeedItem(BaseModel):
    """One entry in a feed. user is None when the author deleted their account."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    user_id: Optional[int] = None
    user: Optional[UserBrief] = None
    album_id: int
    album: AlbumBrief
    data: ActivityPayload
    created_at: datetime


class EmptyFeedReason(str, Enum):
    """Why a feed page has no items."""
    NOT_FOLLOWING = "not_following"
    NO_ACTIVITY = "no_activity"


EMPTY_FEED_MESSAGES = {
    EmptyFeedReason.NOT_FOLLOWING: "Follow other users to see their ratings and reviews here.",
    EmptyFeedReason.NO_ACTIVITY: "No activity yet.",
}


class FeedPage(BaseModel):
    """A page of feed items plus pagination state."""
    items: List[FeedItem]
    page: int
    limit: int
    has_more: bool
    next_cursor: Optional[str] = None
    empty_reason: Optional[EmptyFeedReason] = None
    message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @classmethod
    def empty(cls, page: int, limit: int, reason: EmptyFeedReason) -> "FeedPage":
        return cls(
            items=[],
            page=page,
            limit=limit,
            has_more=False,
            empty_reason=reason,
            message=EMPTY_FEED_MESSAGES[reason],
        )


class ActivityStats(BaseModel):
    """Activity counters for a user."""
    user_id: int
    activity_count: int
    has_activity: bool


class FeedCursor(BaseModel):
    """Position in a feed: the (created_at, id) of the last item seen."""
    created_at: datetime
    id: int

    def encode(self) -> str:
        raw = f"{self.created_at.isoformat()}|{self.id}".encode()
        return base64.urlsafe_b64encode(raw).decode()

    @classmethod
    def decode(cls, token: str) -> "FeedCursor":
        try:
            raw = base64.urlsafe_b64decode(token.encode()).decode()
            created_at, _, item_id = raw.rpartition("|")
            parsed = datetime.fromisoformat(created_at)
            return cls(created_at=_as_utc(parsed), id=int(item_id))
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise ValidationError("Invalid feed cursor") from e


def _as_utc(value: datetime) -> datetime:
    """Timestamps are stored in UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
