"""
API endpoints for user file uploads (CVs and other documents).

Owners manage their own files; recruiters can read every upload.
"""

import logging
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ensure_owner_or_recruiter, get_current_user, get_recruiter
from app.core.errors import AppError, NotFoundError
from app.core.pagination import Pagination, get_pagination
from app.core.responses import success
from app.core.storage import StorageBackend, StorageError, get_storage
from app.crud import file_upload as upload_crud
from app.crud import job_application as application_crud
from app.crud import user as user_crud
from app.models.file_upload import FileUpload
from app.models.user import User
from app.schemas.job_application import FileUploadResponse, FileUploadUpdate
from app.services.uploads import discard_stored_file, store_upload

router = APIRouter(prefix="/uploads", tags=["Uploads"])
logger = logging.getLogger(__name__)


def _uploads(items) -> list:
    return [FileUploadResponse.model_validate(item) for item in items]


def _content_disposition(title: str) -> str:
    """Attachment header with an ASCII fallback name and the real name in RFC 5987 form."""
    fallback = "".join(
        c if c.isascii() and c.isprintable() and c not in '"\\' else "_" for c in title
    ) or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(title, safe='')}"


def _get_owned(db: Session, upload_id: int, user: User) -> FileUpload:
    upload = upload_crud.get_by_id(db, upload_id)
    if not upload:
        raise NotFoundError("upload not found")
    ensure_owner_or_recruiter(user, upload.user_id)
    return upload


@router.post("/", status_code=201)
async def upload_files(
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    """
    Upload one or more files for the current user.

    Either every file is recorded or none is: on failure the files already
    written to storage are removed again.
    """
    stored = []
    try:
        for file in files:
            stored.append(await store_upload(db, storage, user, file))
        db.commit()
    except (AppError, SQLAlchemyError) as e:
        db.rollback()
        for upload in stored:
            discard_stored_file(storage, upload.path)
        if isinstance(e, AppError):
            raise
        logger.error(f"Failed to record uploads for user {user.id}: {e}")
        raise AppError("error - unable to save uploads", 500, is_operational=False)

    for upload in stored:
        db.refresh(upload)
    logger.info(f"User {user.id} uploaded {len(stored)} file(s)")
    return success(uploads=_uploads(stored))


@router.get("/")
def list_uploads(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    items, total = upload_crud.get_multi(db, pagination)
    return success(uploads=_uploads(items), totalRecords=total)


@router.get("/users/{user_id}")
def find_by_user(user_id: int, db: Session = Depends(get_db), recruiter: User = Depends(get_recruiter)):
    if not user_crud.get_by_id(db, user_id):
        raise NotFoundError("user not found")
    return success(uploads=_uploads(upload_crud.get_by_user(db, user_id)))


@router.get("/job-applications/{application_id}")
def find_by_job_application(
    application_id: int,
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    """The CV attached to an application."""
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("application not found")
    if application.file_upload is None:
        raise NotFoundError("no CV attached to this application")
    return success(upload=FileUploadResponse.model_validate(application.file_upload))


@router.get("/{upload_id}")
def get_upload(upload_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return success(upload=FileUploadResponse.model_validate(_get_owned(db, upload_id, user)))


@router.get("/{upload_id}/download")
def download_upload(
    upload_id: int,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    upload = _get_owned(db, upload_id, user)
    try:
        content = storage.download_file(upload.path)
    except StorageError as e:
        logger.error(f"Stored file missing for upload {upload_id}: {e}")
        raise NotFoundError("file not found in storage")

    return StreamingResponse(
        content,
        media_type=upload.mimetype or "application/octet-stream",
        headers={"Content-Disposition": _content_disposition(upload.title)},
    )


@router.put("/{upload_id}")
def rename_upload(
    upload_id: int,
    request: FileUploadUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    upload = upload_crud.rename(db, _get_owned(db, upload_id, user), request.title)
    return success(upload=FileUploadResponse.model_validate(upload))


@router.delete("/{upload_id}")
def delete_upload(
    upload_id: int,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    """Delete an upload and its stored file. CVs attached to an application are kept."""
    upload = _get_owned(db, upload_id, user)
    if upload_crud.is_attached_to_application(db, upload.id):
        raise AppError("this file is attached to a job application and cannot be deleted", 400)

    path = upload.path
    upload_crud.delete(db, upload)
    discard_stored_file(storage, path)
    logger.info(f"User {user.id} deleted upload {upload_id}")
    return success(deleted=1)
