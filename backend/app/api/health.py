"""Health check endpoints for monitoring and load balancers."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
import redis

from app.database import get_db
from app.config import settings
from app import __version__


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for load balancers and monitoring.

    Redis only matters when sessions are tracked, so a redis failure
    without session tracking reports degraded rather than unhealthy.
    """
    status = {
        "status": "healthy",
        "version": __version__,
        "checks": {}
    }

    # Database check
    try:
        db.execute(text("SELECT 1"))
        status["checks"]["database"] = "ok"
    except Exception as e:
        status["checks"]["database"] = f"error: {str(e)}"
        status["status"] = "unhealthy"

    # Redis check
    try:
        r = redis.from_url(settings.redis_url)
        r.ping()
        status["checks"]["redis"] = "ok"
    except redis.RedisError as e:
        status["checks"]["redis"] = f"error: {str(e)}"
        if settings.session_tracking:
            status["status"] = "unhealthy"
        elif status["status"] == "healthy":
            status["status"] = "degraded"

    return status
