"""Authentication and account endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user, get_session_store, get_token
from app.services.auth import AuthService
from app.services.account import AccountDeletionService
from app.services.sessions import SessionStore
from app.schemas.user import UserCreate, UserLogin, LoginResponse, UserResponse
from app.schemas.common import MessageResponse
from app.models.user import User

router = APIRouter()


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: UserCreate,
    db: Session = Depends(get_db),
    sessions: Optional[SessionStore] = Depends(get_session_store),
):
    """Create an account and return a token for it."""
    auth = AuthService(db, sessions)
    user = auth.create_user(request.username, request.password, request.email)
    token = auth.create_token(user.id)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    request: UserLogin,
    db: Session = Depends(get_db),
    sessions: Optional[SessionStore] = Depends(get_session_store),
):
    """Authenticate user and return JWT token."""
    auth = AuthService(db, sessions)
    user = auth.authenticate(request.username, request.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    token = auth.create_token(user.id)

    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(get_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    sessions: Optional[SessionStore] = Depends(get_session_store),
):
    """Logout current user. The token stops working when sessions are tracked."""
    if sessions is not None:
        decoded = AuthService(db, sessions).decode_token(token)
        if decoded and decoded[1]:
            sessions.revoke(decoded[1])
    return MessageResponse(message="Logged out successfully")


@router.post("/refresh", response_model=LoginResponse)
def refresh(
    token: str = Depends(get_token),
    db: Session = Depends(get_db),
    sessions: Optional[SessionStore] = Depends(get_session_store),
):
    """Exchange a valid token for a new one with a fresh expiry."""
    new_token, user = AuthService(db, sessions).refresh_token(token)
    return LoginResponse(token=new_token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    """Get current user info."""
    return UserResponse.model_validate(user)


@router.delete("/account")
def delete_account(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    sessions: Optional[SessionStore] = Depends(get_session_store),
):
    """Delete the current account. Ratings and reviews stay, anonymized."""
    result = AccountDeletionService(db, sessions=sessions).delete_account(user.id)
    return {
        "message": "Account deleted",
        "ratings_kept": result.ratings_count,
        "reviews_kept": result.reviews_count,
        "follows_removed": result.follows_count,
    }
