"""
CRUD operations for FileUpload model.

These functions only touch database rows; writing and removing the stored
bytes is the storage backend's job (see app.core.storage).
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.pagination import Pagination
from app.models.file_upload import FileUpload
from app.models.job_application import JobApplication


def get_by_id(db: Session, upload_id: int) -> Optional[FileUpload]:
    return db.query(FileUpload).filter(FileUpload.id == upload_id).first()


def get_multi(
    db: Session,
    pagination: Pagination,
    user_id: Optional[int] = None,
) -> Tuple[List[FileUpload], int]:
    query = db.query(FileUpload)
    if user_id is not None:
        query = query.filter(FileUpload.user_id == user_id)

    total = query.count()
    items = query.order_by(FileUpload.id.desc()).offset(pagination.offset).limit(pagination.limit).all()
    return items, total


def get_by_user(db: Session, user_id: int) -> List[FileUpload]:
    return db.query(FileUpload).filter(FileUpload.user_id == user_id).order_by(FileUpload.id).all()


def create(
    db: Session,
    user_id: int,
    title: str,
    name: str,
    path: str,
    mimetype: Optional[str],
    size_bytes: int,
) -> FileUpload:
    """Stage a FileUpload row (flush only)."""
    upload = FileUpload(
        user_id=user_id,
        title=title,
        name=name,
        path=path,
        mimetype=mimetype,
        size_bytes=size_bytes,
    )
    db.add(upload)
    db.flush()
    return upload


def rename(db: Session, upload: FileUpload, title: str) -> FileUpload:
    upload.title = title
    db.commit()
    db.refresh(upload)
    return upload


def is_attached_to_application(db: Session, upload_id: int) -> bool:
    return db.query(JobApplication.id).filter(JobApplication.file_upload_id == upload_id).first() is not None


def delete(db: Session, upload: FileUpload) -> None:
    db.delete(upload)
    db.commit()
