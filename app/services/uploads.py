"""
Storing uploaded files: size limits, CV type checks, storage backend and
FileUpload rows.
"""

import logging
import os
from io import BytesIO

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import AppError
from app.core.storage import StorageBackend, StorageError, guess_content_type
from app.crud import file_upload as upload_crud
from app.models.file_upload import FileUpload
from app.models.user import User

logger = logging.getLogger(__name__)

CV_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",  # .doc
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",  # .docx
}
CV_EXTENSIONS = {".pdf", ".doc", ".docx"}

READ_CHUNK_BYTES = 1024 * 1024


def validate_cv(file: UploadFile) -> None:
    """Only PDF, DOC and DOCX files are accepted as CVs."""
    extension = os.path.splitext(file.filename or "")[1].lower()
    if file.content_type not in CV_CONTENT_TYPES and extension not in CV_EXTENSIONS:
        raise AppError(
            f"Only PDF, DOC, and DOCX files are supported. Received: {file.content_type}",
            400,
        )


async def read_limited(file: UploadFile, max_bytes: int) -> bytes:
    """Read an upload fully, rejecting empty files and files over max_bytes."""
    size = 0
    chunks = []
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise AppError(f"File too large (max {max_bytes} bytes)", 413)
        chunks.append(chunk)

    content = b"".join(chunks)
    if not content:
        raise AppError("Empty file", 400)
    return content


async def store_upload(
    db: Session,
    storage: StorageBackend,
    user: User,
    file: UploadFile,
    folder: str = "",
) -> FileUpload:
    """
    Write an uploaded file to storage and stage its FileUpload row (flush only).

    If the caller's transaction later fails it should call discard_stored_file()
    so the stored bytes do not outlive their row.
    """
    content = await read_limited(file, settings.MAX_UPLOAD_BYTES)
    filename = os.path.basename(file.filename or "upload")

    try:
        path = storage.upload_file(BytesIO(content), filename, folder)
    except StorageError as e:
        logger.error(f"Failed to store upload {filename} for user {user.id}: {e}")
        raise AppError("unable to store file", 500, is_operational=False)

    logger.info(f"Stored upload for user {user.id}: {path}")
    return upload_crud.create(
        db,
        user_id=user.id,
        title=filename,
        name=os.path.basename(path),
        path=path,
        mimetype=file.content_type or guess_content_type(filename),
        size_bytes=len(content),
    )


def discard_stored_file(storage: StorageBackend, path: str) -> None:
    if not storage.delete_file(path):
        logger.warning(f"Could not remove stored file {path}")
