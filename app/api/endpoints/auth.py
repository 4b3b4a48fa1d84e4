"""
Authentication endpoints for user registration, login, and token refresh.

Implements JWT-based stateless authentication:
- POST /register: Create new job-seeker account
- POST /login: Authenticate and receive JWT tokens
- POST /refresh: Get new access token using refresh token
- GET /me: Get current user profile
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import create_token_pair, decode_token
from app.core.deps import get_current_user
from app.core.responses import success
from app.crud import user as user_crud
from app.models.user import User
from app.schemas.user import (
    UserRegisterRequest,
    UserLoginRequest,
    TokenResponse,
    TokenRefreshRequest,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


def _issue_tokens(user: User, include_user: bool = True) -> TokenResponse:
    access_token, refresh_token = create_token_pair(user.id, user.role.value)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserResponse.model_validate(user) if include_user else None,
    )


@router.post("/register", status_code=201)
def register(
    request: UserRegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new job-seeker account.

    New accounts always get the "user" role; admins promote recruiters
    through /admin/users/{id}/role.

    Returns JWT tokens for immediate login.
    """
    if user_crud.get_by_email(db, request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = user_crud.create(
        db,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    logger.info(f"New user registered: {new_user.email} (id: {new_user.id})")

    return success(**_issue_tokens(new_user).model_dump())


@router.post("/login")
def login(
    request: UserLoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT tokens.

    Validates email/password and returns access + refresh tokens.
    Updates last_login_at timestamp.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Please contact support."
        )

    user_crud.record_login(db, user)
    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return success(**_issue_tokens(user).model_dump())


@router.post("/refresh")
def refresh_token(
    request: TokenRefreshRequest,
    db: Session = Depends(get_db)
):
    """
    Refresh access token using refresh token.

    Validates the refresh token and issues a new token pair.
    """
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token"
    )
    try:
        payload = decode_token(request.refresh_token, expected_type="refresh")
        user_id = int(payload["sub"])
    except (JWTError, ValueError) as e:
        logger.warning(f"Token refresh error: {e}")
        raise invalid

    # Verify user still exists and is active
    user = user_crud.get_by_id(db, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return success(**_issue_tokens(user, include_user=False).model_dump())


@router.get("/me")
def get_current_user_profile(
    current_user: User = Depends(get_current_user)
):
    """
    Get current authenticated user's profile.

    Requires valid JWT token in Authorization header.
    """
    return success(user=UserResponse.model_validate(current_user))
