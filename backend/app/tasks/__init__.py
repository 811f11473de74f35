"""Celery background tasks."""
from app.tasks.maintenance import project_missing_activities

__all__ = [
    "project_missing_activities",
]
