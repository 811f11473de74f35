"""Shared column helpers."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time, set client-side so ordering keys are exact."""
    return datetime.now(timezone.utc)
