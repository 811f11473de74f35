"""FastAPI dependencies for authentication, sessions and the album catalog."""
from functools import lru_cache
from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.integrations.spotify import SpotifyCatalog
from app.services.auth import AuthService
from app.services.sessions import SessionStore
from app.models.user import User

security = HTTPBearer(auto_error=False)


@lru_cache
def _session_store() -> SessionStore:
    return SessionStore.from_url(settings.redis_url)


def get_session_store() -> Optional[SessionStore]:
    """Redis session store, or None when session tracking is disabled."""
    if not settings.session_tracking:
        return None
    return _session_store()


async def get_catalog() -> AsyncIterator[SpotifyCatalog]:
    """Album catalog client, closed after the request."""
    catalog = SpotifyCatalog()
    try:
        yield catalog
    finally:
        await catalog.close()


def get_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Raw bearer token from the Authorization header."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_token),
    db: Session = Depends(get_db),
    sessions: Optional[SessionStore] = Depends(get_session_store),
) -> User:
    """Get the current authenticated user from JWT token."""
    auth = AuthService(db, sessions)
    decoded = auth.decode_token(token)

    if not decoded:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id, jti = decoded
    if sessions is not None and (not jti or not sessions.is_active(jti)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has been revoked",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = auth.get_user_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
