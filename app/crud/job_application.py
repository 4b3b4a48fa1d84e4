"""
CRUD operations for JobApplication model.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.pagination import Pagination
from app.models.job_application import JobApplication


def get_by_id(db: Session, application_id: int) -> Optional[JobApplication]:
    return db.query(JobApplication).filter(JobApplication.id == application_id).first()


def get_for_user_and_job(db: Session, user_id: int, job_id: int) -> Optional[JobApplication]:
    return db.query(JobApplication).filter(
        JobApplication.user_id == user_id,
        JobApplication.job_id == job_id,
    ).first()


def get_multi(
    db: Session,
    pagination: Pagination,
    job_id: Optional[int] = None,
    user_id: Optional[int] = None,
    status_id: Optional[int] = None,
    include_withdrawn: bool = True,
) -> Tuple[List[JobApplication], int]:
    """
    Retrieve a page of applications, newest first.

    Returns:
        (applications on this page, total number of matching applications)
    """
    query = db.query(JobApplication)
    if job_id is not None:
        query = query.filter(JobApplication.job_id == job_id)
    if user_id is not None:
        query = query.filter(JobApplication.user_id == user_id)
    if status_id is not None:
        query = query.filter(JobApplication.job_application_status_id == status_id)
    if not include_withdrawn:
        query = query.filter(JobApplication.withdrawn_at.is_(None))

    total = query.count()
    items = (
        query.order_by(JobApplication.id.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
        .all()
    )
    return items, total


def get_by_job(db: Session, job_id: int) -> List[JobApplication]:
    return db.query(JobApplication).filter(JobApplication.job_id == job_id).order_by(JobApplication.id).all()


def get_by_user(db: Session, user_id: int) -> List[JobApplication]:
    return db.query(JobApplication).filter(JobApplication.user_id == user_id).order_by(JobApplication.id).all()


def get_by_status(db: Session, status_id: int) -> List[JobApplication]:
    return (
        db.query(JobApplication)
        .filter(JobApplication.job_application_status_id == status_id)
        .order_by(JobApplication.id)
        .all()
    )


def create(
    db: Session,
    job_id: int,
    user_id: int,
    file_upload_id: Optional[int],
    status_id: Optional[int],
    cover_letter: Optional[str] = None,
) -> JobApplication:
    """Stage a new application (flush only; the endpoint commits it with the CV upload)."""
    application = JobApplication(
        job_id=job_id,
        user_id=user_id,
        file_upload_id=file_upload_id,
        job_application_status_id=status_id,
        cover_letter=cover_letter,
    )
    db.add(application)
    db.flush()
    return application


def update(db: Session, application: JobApplication, data: Dict[str, Any]) -> JobApplication:
    for key in ("job_application_status_id", "cover_letter"):
        if key in data:
            setattr(application, key, data[key])
    db.commit()
    db.refresh(application)
    return application


def withdraw(db: Session, application: JobApplication, status_id: Optional[int]) -> JobApplication:
    application.withdrawn_at = datetime.now(timezone.utc)
    if status_id is not None:
        application.job_application_status_id = status_id
    db.commit()
    db.refresh(application)
    return application


def delete(db: Session, application: JobApplication) -> None:
    db.delete(application)
    db.commit()
