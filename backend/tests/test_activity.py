"""Tests for the activity log and its projection."""
from unittest.mock import patch

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from app.models.activity import Activity, ActivityType
from app.services.activity import ActivityService
from app.services.feed import FeedService
from app.services.ratings import RatingService
from app.services.reviews import ReviewService
from app.services.social import SocialService


def _activity_count(db):
    return db.scalar(select(func.count(Activity.id)))


def test_one_activity_per_source(db, alice, test_album):
    """The (type, source_id) constraint stops duplicate activities."""
    rating = RatingService(db).upsert(alice.id, test_album.id, 4)

    with pytest.raises(IntegrityError):
        ActivityService(db).emit_rating(rating)
    db.rollback()

    assert _activity_count(db) == 1


def test_find_for_source(db, alice, test_album):
    review = ReviewService(db).upsert(alice.id, test_album.id, "Warm and strange")
    activities = ActivityService(db)

    found = activities.find_for_source(ActivityType.REVIEW, review.id)

    assert found.data == {"type": "review", "content": "Warm and strange"}
    assert activities.find_for_source(ActivityType.RATING, review.id) is None


def test_count_and_has_activity(db, alice, bob, test_album):
    RatingService(db).upsert(alice.id, test_album.id, 4)
    activities = ActivityService(db)

    assert activities.count_for_user(alice.id) == 1
    assert activities.has_activity(alice.id) is True
    assert activities.has_activity(bob.id) is False


class TestDeletedSourceIds:
    """Activities outlive their source rows, so source ids are never reused."""

    def test_new_rating_after_delete_gets_its_own_activity(
        self, db, alice, bob, carol, test_album, other_album
    ):
        ratings = RatingService(db)
        SocialService(db).follow(carol.id, bob.id)
        deleted = ratings.upsert(alice.id, test_album.id, 3)
        deleted_id = deleted.id
        ratings.delete(alice.id, test_album.id)

        fresh = ratings.upsert(bob.id, other_album.id, 5)

        assert fresh.id != deleted_id
        assert ActivityService(db).count_for_user(bob.id) == 1
        items = FeedService(db).feed(carol.id).items
        assert [item.data.rating for item in items] == [5]

    def test_new_review_after_delete_gets_its_own_activity(self, db, alice, bob, test_album):
        reviews = ReviewService(db)
        deleted = reviews.upsert(alice.id, test_album.id, "Gone soon")
        deleted_id = deleted.id
        reviews.delete(alice.id, test_album.id)

        fresh = reviews.upsert(bob.id, test_album.id, "Still here")

        assert fresh.id != deleted_id
        found = ActivityService(db).find_for_source(ActivityType.REVIEW, fresh.id)
        assert found is not None
        assert found.user_id == bob.id


class TestProjection:
    """project_missing catches up on failed emissions."""

    def test_projects_missing_activities(self, db, alice, bob, test_album, other_album):
        with patch(
            "app.services.activity.ActivityService.emit_rating",
            side_effect=RuntimeError("down"),
        ):
            RatingService(db).upsert(alice.id, test_album.id, 4)
        with patch(
            "app.services.activity.ActivityService.emit_review",
            side_effect=RuntimeError("down"),
        ):
            ReviewService(db).upsert(alice.id, other_album.id, "Late to the party")
        RatingService(db).upsert(bob.id, other_album.id, 2)
        assert _activity_count(db) == 1

        projected = ActivityService(db).project_missing()

        assert projected == {"rating": 1, "review": 1}
        assert _activity_count(db) == 3

    def test_projection_is_idempotent(self, db, alice, test_album):
        with patch(
            "app.services.activity.ActivityService.emit_rating",
            side_effect=RuntimeError("down"),
        ):
            RatingService(db).upsert(alice.id, test_album.id, 4)
        activities = ActivityService(db)

        activities.project_missing()
        second = activities.project_missing()

        assert second == {"rating": 0, "review": 0}
        assert _activity_count(db) == 1

    def test_projected_activity_appears_in_feed(self, db, alice, bob, test_album):
        SocialService(db).follow(alice.id, bob.id)
        with patch(
            "app.services.activity.ActivityService.emit_rating",
            side_effect=RuntimeError("down"),
        ):
            RatingService(db).upsert(bob.id, test_album.id, 5)
        assert FeedService(db).feed(alice.id).is_empty

        ActivityService(db).project_missing()

        items = FeedService(db).feed(alice.id).items
        assert len(items) == 1
        assert items[0].data.rating == 5

    def test_anonymized_content_is_not_projected(self, db, alice, test_album):
        from app.services.account import AccountDeletionService

        with patch(
            "app.services.activity.ActivityService.emit_rating",
            side_effect=RuntimeError("down"),
        ):
            RatingService(db).upsert(alice.id, test_album.id, 4)
        AccountDeletionService(db).delete_account(alice.id)

        assert ActivityService(db).project_missing() == {"rating": 0, "review": 0}
