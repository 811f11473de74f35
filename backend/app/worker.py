"""Celery worker configuration.

Run worker: celery -A app.worker worker -l info -Q maintenance
Run beat: celery -A app.worker beat -l info
"""
from celery import Celery
from celery.schedules import crontab

from app.config import settings

celery_app = Celery(
    "needledrop",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "app.tasks.maintenance"
    ]
)

# Celery configuration
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task routing
    task_routes={
        "app.tasks.maintenance.*": {"queue": "maintenance"},
    },

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completes
    task_reject_on_worker_lost=True,

    # Worker settings
    worker_prefetch_multiplier=1,

    # Result settings
    result_expires=3600,  # Results expire after 1 hour

    # Beat schedule - periodic tasks
    beat_schedule={
        # Emit activities for content whose emission failed at write time
        "project-missing-activities": {
            "task": "app.tasks.maintenance.project_missing_activities",
            "schedule": crontab(minute=f"*/{settings.activity_projection_interval_minutes}"),
            "options": {"queue": "maintenance"}
        },
    }
)
