"""Redis-backed registry of issued tokens, so they can be revoked."""
import logging
from typing import Optional

import redis

from app.config import settings

logger = logging.getLogger(__name__)

SESSION_KEY = "session:{jti}"
USER_SESSIONS_KEY = "user_sessions:{user_id}"


class SessionStore:
    """Tracks token ids per user in redis.

    A token is valid only while its session key exists. Keys expire
    with the token.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: Optional[str] = None) -> "SessionStore":
        return cls(redis.from_url(url or settings.redis_url, decode_responses=True))

    def register(self, user_id: int, jti: str, ttl_seconds: int) -> None:
        """Record a newly issued token."""
        user_key = USER_SESSIONS_KEY.format(user_id=user_id)
        pipe = self.client.pipeline()
        pipe.set(SESSION_KEY.format(jti=jti), user_id, ex=ttl_seconds)
        pipe.sadd(user_key, jti)
        pipe.expire(user_key, ttl_seconds)
        pipe.execute()

    def is_active(self, jti: str) -> bool:
        """Check that a token has not been revoked or expired."""
        return bool(self.client.exists(SESSION_KEY.format(jti=jti)))

    def revoke(self, jti: str) -> None:
        """Revoke a single token (logout)."""
        self.client.delete(SESSION_KEY.format(jti=jti))

    def revoke_all(self, user_id: int) -> int:
        """Revoke every token issued to a user. Returns how many were removed."""
        user_key = USER_SESSIONS_KEY.format(user_id=user_id)
        jtis = self.client.smembers(user_key)
        keys = [SESSION_KEY.format(jti=jti) for jti in jtis]
        removed = self.client.delete(*keys) if keys else 0
        self.client.delete(user_key)
        return removed
