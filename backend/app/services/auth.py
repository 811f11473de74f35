"""Authentication service."""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy import select, or_
from sqlalchemy.orm import Session
from app.config import settings
from app.exceptions import AuthenticationError, ConflictError
from app.models.user import User
from app.services.sessions import SessionStore

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthService:
    """Identity store adapter: users, password hashes and tokens."""

    def __init__(self, db: Session, sessions: Optional[SessionStore] = None):
        self.db = db
        self.sessions = sessions

    def verify_password(self, plain: str, hashed: str) -> bool:
        """Verify a password against its hash."""
        return pwd_context.verify(plain, hashed)

    def hash_password(self, password: str) -> str:
        """Hash a password for storage."""
        return pwd_context.hash(password)

    def create_token(self, user_id: int) -> str:
        """Create a JWT token for a user, registering it when sessions are tracked."""
        now = datetime.now(timezone.utc)
        expiry = timedelta(hours=settings.jwt_expiry_hours)
        jti = uuid.uuid4().hex
        payload = {
            "sub": str(user_id),
            "jti": jti,
            "exp": now + expiry,
            "iat": now,
        }
        token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        if self.sessions is not None:
            self.sessions.register(user_id, jti, int(expiry.total_seconds()))
        return token

    def decode_token(self, token: str) -> Optional[Tuple[int, Optional[str]]]:
        """Decode a JWT token and return (user_id, jti), or None if invalid."""
        try:
            payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
            return int(payload.get("sub")), payload.get("jti")
        except (JWTError, TypeError, ValueError):
            return None

    def refresh_token(self, token: str) -> Tuple[str, User]:
        """Issue a fresh token for the holder of a valid one.

        The old token stays valid until it expires or is logged out.
        """
        decoded = self.decode_token(token)
        if decoded is None:
            raise AuthenticationError("Invalid or expired token")
        user_id, jti = decoded

        if self.sessions is not None and not (jti and self.sessions.is_active(jti)):
            raise AuthenticationError("Session has been revoked")

        user = self.get_user_by_id(user_id)
        if not user:
            raise AuthenticationError("User not found")

        return self.create_token(user.id), user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Authenticate a user by username and password."""
        user = self.db.scalar(select(User).where(User.username == username))
        if user and self.verify_password(password, user.password_hash):
            return user
        return None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by ID."""
        return self.db.get(User, user_id)

    def create_user(self, username: str, password: str, email: str) -> User:
        """Create a new user."""
        taken = self.db.scalar(
            select(User.id).where(or_(User.username == username, User.email == email))
        )
        if taken:
            raise ConflictError("Username or email already registered")

        user = User(
            username=username,
            email=email,
            password_hash=self.hash_password(password),
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
