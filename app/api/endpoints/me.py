"""
Profile endpoints for the signed-in user: their account, applications and uploads.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.responses import success
from app.crud import file_upload as upload_crud
from app.crud import job_application as application_crud
from app.models.user import User
from app.schemas.job_application import FileUploadResponse, JobApplicationResponse
from app.schemas.user import UserResponse

router = APIRouter(prefix="/me", tags=["Profile"])


@router.get("")
def get_profile(user: User = Depends(get_current_user)):
    return success(user=UserResponse.model_validate(user))


@router.get("/job-applications")
def my_applications(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    items = application_crud.get_by_user(db, user.id)
    return success(applications=[JobApplicationResponse.model_validate(i) for i in items])


@router.get("/uploads")
def my_uploads(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    items = upload_crud.get_by_user(db, user.id)
    return success(uploads=[FileUploadResponse.model_validate(i) for i in items])
