"""Album rating service."""
from sqlalchemy import select, func

from app.exceptions import RatingOutOfRangeError
from app.models.rating import Rating, MIN_RATING, MAX_RATING
from app.schemas.album import AlbumStats
from app.services.content import AuthoredContentService


class RatingService(AuthoredContentService):
    """Create/update ratings and compute album aggregates."""

    model = Rating
    value_field = "rating"
    label = "rating"

    def validate(self, value) -> int:
        """Ratings are whole stars from 1 to 5."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise RatingOutOfRangeError()
        if value < MIN_RATING or value > MAX_RATING:
            raise RatingOutOfRangeError()
        return value

    def emit_activity(self, row: Rating):
        return self.activity.emit_rating(row)

    def average_rating(self, album_id: int) -> float:
        """Mean over every rating of the album, anonymized ones included.

        Returns 0.0 for an unrated album.
        """
        average = self.db.scalar(
            select(func.avg(Rating.rating)).where(Rating.album_id == album_id)
        )
        return float(average) if average is not None else 0.0

    def album_stats(self, album_id: int) -> AlbumStats:
        """Average rating and rating count for an album."""
        return AlbumStats(
            average_rating=self.average_rating(album_id),
            rating_count=self.count_for_album(album_id),
        )
