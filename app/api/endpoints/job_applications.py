"""
API endpoints for job applications.

Job seekers apply with a CV (multipart field `cv`); recruiters review,
update and delete applications. Applicants (or recruiters) can withdraw.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import ensure_owner_or_recruiter, get_current_user, get_job_board_user, get_recruiter
from app.core.errors import AppError, NotFoundError
from app.core.pagination import Pagination, get_pagination
from app.core.responses import success
from app.core.storage import StorageBackend, get_storage
from app.crud import job as job_crud
from app.crud import job_application as application_crud
from app.crud import lookup as lookup_crud
from app.crud import user as user_crud
from app.models.lookups import JobApplicationStatus
from app.models.user import User
from app.schemas.job_application import JobApplicationResponse, JobApplicationUpdate
from app.services.uploads import discard_stored_file, store_upload, validate_cv

router = APIRouter(prefix="/job-applications", tags=["Job Applications"])
logger = logging.getLogger(__name__)


def _applications(items) -> list:
    return [JobApplicationResponse.model_validate(item) for item in items]


def _status_id(db: Session, name: str) -> Optional[int]:
    status = lookup_crud.get_by_name(db, JobApplicationStatus, name)
    return status.id if status else None


def _get_or_404(db: Session, application_id: int):
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("application not found")
    return application


@router.post("/", status_code=201)
async def apply_for_job(
    job_id: int = Form(...),
    cover_letter: Optional[str] = Form(None),
    cv: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    user: User = Depends(get_job_board_user),
):
    """
    Apply for a job with a CV.

    Flow:
    1. Check the job exists, is active, and the user has not applied already
    2. Validate the CV type (PDF, DOC, DOCX) and size
    3. Store the CV and record it as one of the user's uploads
    4. Create the application with the "submitted" status (when defined)
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("job not found")
    if not job.active:
        raise AppError("this job is not accepting applications", 400)
    if application_crud.get_for_user_and_job(db, user.id, job_id):
        raise AppError("you have already applied for this job", 400)

    validate_cv(cv)
    upload = await store_upload(db, storage, user, cv, folder="cv")

    try:
        application = application_crud.create(
            db,
            job_id=job_id,
            user_id=user.id,
            file_upload_id=upload.id,
            status_id=_status_id(db, settings.APPLICATION_SUBMITTED_STATUS),
            cover_letter=cover_letter,
        )
        db.commit()
    except IntegrityError:
        # A concurrent request for the same user and job won the unique constraint
        db.rollback()
        discard_stored_file(storage, upload.path)
        logger.warning(f"Duplicate application for job {job_id} by user {user.id}")
        raise AppError("you have already applied for this job", 400)
    except SQLAlchemyError as e:
        db.rollback()
        discard_stored_file(storage, upload.path)
        logger.error(f"Failed to create application for job {job_id} by user {user.id}: {e}")
        raise AppError("error - unable to create application", 500, is_operational=False)

    db.refresh(application)
    logger.info(f"User {user.id} applied for job {job_id} (application {application.id})")
    return success(application=JobApplicationResponse.model_validate(application))


@router.get("/")
def list_applications(
    job_id: Optional[int] = None,
    user_id: Optional[int] = None,
    status_id: Optional[int] = None,
    include_withdrawn: bool = True,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    items, total = application_crud.get_multi(
        db,
        pagination,
        job_id=job_id,
        user_id=user_id,
        status_id=status_id,
        include_withdrawn=include_withdrawn,
    )
    return success(applications=_applications(items), totalRecords=total)


@router.get("/jobs/{job_id}")
def find_by_job(job_id: int, db: Session = Depends(get_db), recruiter: User = Depends(get_recruiter)):
    if not job_crud.get_by_id(db, job_id):
        raise NotFoundError("job not found")
    return success(applications=_applications(application_crud.get_by_job(db, job_id)))


@router.get("/users/{user_id}")
def find_by_user(user_id: int, db: Session = Depends(get_db), recruiter: User = Depends(get_recruiter)):
    if not user_crud.get_by_id(db, user_id):
        raise NotFoundError("user not found")
    return success(applications=_applications(application_crud.get_by_user(db, user_id)))


@router.get("/job-application-statuses/{status_id}")
def find_by_status(status_id: int, db: Session = Depends(get_db), recruiter: User = Depends(get_recruiter)):
    if not lookup_crud.get_by_id(db, JobApplicationStatus, status_id):
        raise NotFoundError("job application status not found")
    return success(applications=_applications(application_crud.get_by_status(db, status_id)))


@router.put("/{application_id}/withdraw")
def withdraw_application(
    application_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Withdraw an application. Allowed for the applicant and for recruiters."""
    application = _get_or_404(db, application_id)
    ensure_owner_or_recruiter(user, application.user_id)
    if application.withdrawn_at is not None:
        raise AppError("application has already been withdrawn", 400)

    application = application_crud.withdraw(
        db, application, _status_id(db, settings.APPLICATION_WITHDRAWN_STATUS)
    )
    logger.info(f"User {user.id} withdrew application {application_id}")
    return success(application=JobApplicationResponse.model_validate(application))


@router.get("/{application_id}")
def get_application(application_id: int, db: Session = Depends(get_db), recruiter: User = Depends(get_recruiter)):
    return success(application=JobApplicationResponse.model_validate(_get_or_404(db, application_id)))


@router.put("/{application_id}")
def update_application(
    application_id: int,
    request: JobApplicationUpdate,
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    application = _get_or_404(db, application_id)
    data = request.model_dump(exclude_unset=True)
    if not data:
        raise AppError("application details missing", 400)

    status_id = data.get("job_application_status_id")
    if status_id is not None and not lookup_crud.get_by_id(db, JobApplicationStatus, status_id):
        raise AppError(f"job application status {status_id} does not exist", 400)

    application = application_crud.update(db, application, data)
    logger.info(f"Recruiter {recruiter.id} updated application {application_id}")
    return success(application=JobApplicationResponse.model_validate(application))


@router.delete("/{application_id}")
def delete_application(application_id: int, db: Session = Depends(get_db), recruiter: User = Depends(get_recruiter)):
    """Delete an application. The attached CV stays in the applicant's uploads."""
    application = _get_or_404(db, application_id)
    application_crud.delete(db, application)
    logger.info(f"Recruiter {recruiter.id} deleted application {application_id}")
    return success(deleted=1)
