"""
Pydantic schemas for job applications and file uploads.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class FileUploadResponse(BaseModel):
    id: int
    user_id: int
    title: str
    name: str
    mimetype: Optional[str] = None
    size_bytes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FileUploadUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class JobApplicationUpdate(BaseModel):
    """Recruiter-side update: move the application to another status or edit the cover letter."""
    job_application_status_id: Optional[int] = None
    cover_letter: Optional[str] = None


class JobApplicationResponse(BaseModel):
    id: int
    job_id: int
    user_id: int
    file_upload_id: Optional[int] = None
    job_application_status_id: Optional[int] = None
    cover_letter: Optional[str] = None
    withdrawn_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
