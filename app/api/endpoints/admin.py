"""
Admin API endpoints for account management.

Only accounts with the "admin" role can reach these endpoints.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
from app.core.database import get_db
from app.core.deps import get_admin_user
from app.core.pagination import Pagination, get_pagination
from app.core.responses import success
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.models.file_upload import FileUpload
from app.models.job_application import JobApplication
from app.models.user import User, UserRole
from app.schemas.user import UserActiveUpdate, UserResponse, UserRoleUpdate

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/users")
def list_all_users(
    role: Optional[UserRole] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """List users in the system, optionally filtered by role."""
    users, total = user_crud.get_multi(db, pagination, role=role)
    return success(users=[UserResponse.model_validate(u) for u in users], totalRecords=total)


@router.patch("/users/{user_id}/role")
def change_user_role(
    user_id: int,
    request: UserRoleUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Promote or demote an account (e.g. make a job seeker a recruiter)."""
    user = _get_user_or_404(db, user_id)
    if user.id == admin_user.id and request.role != UserRole.ADMIN:
        raise HTTPException(status_code=400, detail="Admins cannot remove their own admin role")

    user = user_crud.set_role(db, user, request.role)
    logger.info(f"Admin {admin_user.id} set role of user {user_id} to {request.role.value}")
    return success(user=UserResponse.model_validate(user))


@router.patch("/users/{user_id}/active")
def change_user_active(
    user_id: int,
    request: UserActiveUpdate,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Deactivate (or reactivate) an account. Inactive accounts cannot log in."""
    user = _get_user_or_404(db, user_id)
    if user.id == admin_user.id and not request.is_active:
        raise HTTPException(status_code=400, detail="Admins cannot deactivate themselves")

    user = user_crud.set_active(db, user, request.is_active)
    logger.info(f"Admin {admin_user.id} set is_active={request.is_active} for user {user_id}")
    return success(user=UserResponse.model_validate(user))


@router.get("/stats")
def get_system_stats(
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Get system-wide statistics."""
    return success(
        total_users=db.query(func.count(User.id)).scalar(),
        total_recruiters=db.query(func.count(User.id)).filter(User.role == UserRole.RECRUITER).scalar(),
        active_jobs=job_crud.count_active(db),
        total_applications=db.query(func.count(JobApplication.id)).scalar(),
        total_uploads=db.query(func.count(FileUpload.id)).scalar(),
    )
