from pydantic import AfterValidator, BaseModel, Field, field_validator
from typing import Annotated, List, Optional
from datetime import date, datetime

from app.schemas.lookup import LookupResponse, JobCategoryResponse


def _validate_deadline(value: date) -> date:
    if value <= date.today():
        raise ValueError("deadline must be a date in the future")
    return value


FutureDate = Annotated[date, AfterValidator(_validate_deadline)]


class JobCreateRequest(BaseModel):
    """
    Schema for creating a new job.

    `locations`, `categories`, `salary_type_id` and
    `employment_contract_type_id` are checked by the endpoint so that the
    caller gets a single, specific message for each missing group.
    """
    title: str = Field(..., min_length=1, max_length=255)
    salary: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    deadline: FutureDate
    active: bool = False
    salary_type_id: Optional[int] = None
    employment_contract_type_id: Optional[int] = None
    locations: List[int] = Field(default_factory=list)
    categories: List[int] = Field(default_factory=list)


class JobUpdateRequest(BaseModel):
    """
    Partial job update.

    An empty or omitted `locations`/`categories` list leaves the job's
    existing links untouched.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    salary: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    deadline: Optional[FutureDate] = None
    active: Optional[bool] = None
    salary_type_id: Optional[int] = None
    employment_contract_type_id: Optional[int] = None
    locations: Optional[List[int]] = None
    categories: Optional[List[int]] = None

    @field_validator(
        "title",
        "salary",
        "description",
        "deadline",
        "active",
        "salary_type_id",
        "employment_contract_type_id",
    )
    @classmethod
    def reject_null(cls, v):
        """Fields may be omitted, but a job cannot have them cleared."""
        if v is None:
            raise ValueError("must not be null")
        return v


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    salary: str
    description: str
    deadline: date
    active: bool
    salary_type_id: Optional[int] = None
    employment_contract_type_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobPostResponse(JobResponse):
    """A job with its related reference data, as shown on the public job page."""
    locations: List[LookupResponse] = []
    categories: List[JobCategoryResponse] = []
    salary_type: Optional[LookupResponse] = None
    employment_contract_type: Optional[LookupResponse] = None
