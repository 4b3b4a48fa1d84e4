"""
Database models package.
"""

from app.models.user import User, UserRole
from app.models.job import Job
from app.models.lookups import (
    Location,
    JobCategory,
    SalaryType,
    EmploymentContractType,
    JobApplicationStatus,
)
from app.models.associations import JobsInLocations, JobsInCategories
from app.models.file_upload import FileUpload
from app.models.job_application import JobApplication

__all__ = [
    "User",
    "UserRole",
    "Job",
    "Location",
    "JobCategory",
    "SalaryType",
    "EmploymentContractType",
    "JobApplicationStatus",
    "JobsInLocations",
    "JobsInCategories",
    "FileUpload",
    "JobApplication",
]
