"""Maintenance tasks for Celery."""
import logging
from celery import shared_task

from app.database import SessionLocal

logger = logging.getLogger(__name__)


@shared_task(name="app.tasks.maintenance.project_missing_activities")
def project_missing_activities():
    """Create feed activities for ratings and reviews that have none.

    Activity emission is best-effort when content is written; this task
    catches up on whatever was missed. Rerunning it is harmless.
    """
    from app.services.activity import ActivityService

    db = SessionLocal()

    try:
        projected = ActivityService(db).project_missing()
        logger.info(
            f"Activity projection: {projected['rating']} ratings, "
            f"{projected['review']} reviews"
        )
        return projected

    except Exception as e:
        logger.error(f"Activity projection failed: {e}")
        db.rollback()
        return {"error": str(e)}

    finally:
        db.close()
