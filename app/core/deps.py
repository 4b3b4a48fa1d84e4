"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract user context:

- get_current_user: any authenticated, active account
- get_job_board_user: job seekers (role "user"; admins pass every gate)
- get_recruiter: recruiters and admins
- get_admin_user: admins only
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import decode_token
from app.models.user import User, UserRole

# HTTP Bearer token scheme (Authorization: Bearer <token>).
# auto_error is off so a missing header yields the same 401 as a bad token.
security = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate the current user from JWT token.

    Raises:
        HTTPException 401: If token is missing/invalid or user not found
        HTTPException 403: If the account is inactive
    """
    if credentials is None:
        raise _credentials_exception()

    try:
        payload = decode_token(credentials.credentials, expected_type="access")
        user_id = int(payload["sub"])
    except (JWTError, ValueError):
        raise _credentials_exception()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _credentials_exception()

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


def require_roles(*roles: UserRole):
    """Build a dependency that only lets the given roles (and admins) through."""
    allowed = set(roles) | {UserRole.ADMIN}

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action"
            )
        return user

    return dependency


get_job_board_user = require_roles(UserRole.USER)
get_recruiter = require_roles(UserRole.RECRUITER)
get_admin_user = require_roles()


def ensure_owner_or_recruiter(user: User, owner_id: int) -> None:
    """Raise 403 unless the user owns the resource or is a recruiter/admin."""
    if user.id != owner_id and not user.is_recruiter:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this resource"
        )
