"""Tests for album ratings."""
import pytest
from sqlalchemy import select, func
from app.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    RatingOutOfRangeError,
    ReferentialIntegrityError,
)
from app.models.activity import Activity, ActivityType
from app.models.rating import Rating
from app.services.ratings import RatingService


def _activity_count(db, activity_type=ActivityType.RATING):
    return db.scalar(
        select(func.count(Activity.id)).where(Activity.type == activity_type.value)
    )


class TestRatingUpsert:
    """One rating per user and album, activity only on first creation."""

    @pytest.mark.parametrize("value", [1, 2, 3, 4, 5])
    def test_rating_round_trip(self, db, alice, test_album, value):
        service = RatingService(db)

        service.upsert(alice.id, test_album.id, value)

        assert service.get_for_user_and_album(alice.id, test_album.id).rating == value

    @pytest.mark.parametrize("value", [0, 6, -1, 3.5, "4", None, True])
    def test_invalid_rating_rejected(self, db, alice, test_album, value):
        """Anything but a whole number from 1 to 5 is refused before writing."""
        with pytest.raises(RatingOutOfRangeError) as exc:
            RatingService(db).upsert(alice.id, test_album.id, value)

        assert exc.value.status_code == 400
        assert db.scalar(select(func.count(Rating.id))) == 0
        assert _activity_count(db) == 0

    def test_first_rating_emits_activity(self, db, alice, test_album):
        rating = RatingService(db).upsert(alice.id, test_album.id, 5)

        activity = db.scalar(select(Activity))
        assert activity.type == "rating"
        assert activity.user_id == alice.id
        assert activity.album_id == test_album.id
        assert activity.source_id == rating.id
        assert activity.data == {"type": "rating", "rating": 5}

    def test_rerating_updates_without_new_activity(self, db, alice, test_album):
        """Subsequent upserts change the value but never add activities."""
        service = RatingService(db)
        service.upsert(alice.id, test_album.id, 2)
        service.upsert(alice.id, test_album.id, 4)
        service.upsert(alice.id, test_album.id, 5)

        assert db.scalar(select(func.count(Rating.id))) == 1
        assert service.get_for_user_and_album(alice.id, test_album.id).rating == 5
        assert _activity_count(db) == 1

    def test_activity_keeps_original_value(self, db, alice, test_album):
        """Activities are snapshots: editing the rating leaves the feed entry alone."""
        service = RatingService(db)
        service.upsert(alice.id, test_album.id, 2)
        service.upsert(alice.id, test_album.id, 5)

        assert db.scalar(select(Activity)).data["rating"] == 2

    def test_unknown_album(self, db, alice):
        with pytest.raises(ReferentialIntegrityError) as exc:
            RatingService(db).upsert(alice.id, 9999, 3)

        assert exc.value.message == "Album not found"

    def test_unknown_user(self, db, test_album):
        with pytest.raises(ReferentialIntegrityError) as exc:
            RatingService(db).upsert(9999, test_album.id, 3)

        assert exc.value.message == "User not found"

    def test_concurrent_first_rating_becomes_update(self, db, alice, test_album):
        """If another request inserted first, the loser updates and emits nothing."""
        service = RatingService(db)
        service.upsert(alice.id, test_album.id, 2)

        service.create_first_time(alice.id, test_album.id, 4)

        assert db.scalar(select(func.count(Rating.id))) == 1
        assert service.get_for_user_and_album(alice.id, test_album.id).rating == 4
        assert _activity_count(db) == 1

    def test_failed_emission_keeps_rating(self, db, alice, test_album):
        """Activity emission is best-effort; the rating commits regardless."""
        from unittest.mock import patch

        with patch(
            "app.services.activity.ActivityService.emit_rating",
            side_effect=RuntimeError("activity store down"),
        ):
            RatingService(db).upsert(alice.id, test_album.id, 3)

        assert db.scalar(select(func.count(Rating.id))) == 1
        assert _activity_count(db) == 0


class TestRatingReadsAndDeletes:
    """Aggregates, listings and deletion."""

    def test_average_rating(self, db, alice, bob, carol, test_album):
        service = RatingService(db)
        service.upsert(alice.id, test_album.id, 5)
        service.upsert(bob.id, test_album.id, 4)
        service.upsert(carol.id, test_album.id, 3)

        assert service.average_rating(test_album.id) == pytest.approx(4.0)
        stats = service.album_stats(test_album.id)
        assert stats.rating_count == 3

    def test_average_rating_without_ratings(self, db, test_album):
        assert RatingService(db).average_rating(test_album.id) == 0.0

    def test_for_user_newest_first(self, db, alice, test_album, other_album):
        service = RatingService(db)
        service.upsert(alice.id, test_album.id, 3)
        service.upsert(alice.id, other_album.id, 4)

        ratings = service.for_user(alice.id)

        assert [r.album.name for r in ratings] == ["Kid A", "The Dark Side of the Moon"]

    def test_delete_keeps_activity(self, db, alice, test_album):
        service = RatingService(db)
        rating = service.upsert(alice.id, test_album.id, 4)

        service.delete_by_id(rating.id, alice.id)

        assert db.scalar(select(func.count(Rating.id))) == 0
        assert _activity_count(db) == 1

    def test_delete_someone_elses_rating(self, db, alice, bob, test_album):
        rating = RatingService(db).upsert(alice.id, test_album.id, 4)

        with pytest.raises(PermissionDeniedError):
            RatingService(db).delete_by_id(rating.id, bob.id)

    def test_delete_missing_rating(self, db, alice, test_album):
        with pytest.raises(NotFoundError):
            RatingService(db).delete(alice.id, test_album.id)
