"""
API endpoints for reference data.

Locations, job categories, salary types, employment contract types and
job application statuses share one CRUD surface:

- GET /              list (paginated, public)
- GET /{id}          find (public)
- GET /jobs/{job_id} rows related to a job (public)
- POST /, PUT /{id}, DELETE /{id}  recruiters only

build_lookup_router() creates that surface for one model.
"""

import logging
from typing import Callable, List, Optional, Type

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_recruiter
from app.core.errors import AppError, NotFoundError
from app.core.pagination import Pagination, get_pagination
from app.core.responses import success
from app.crud import job as job_crud
from app.crud import lookup as lookup_crud
from app.models.job import Job
from app.models.job_application import JobApplication
from app.models.lookups import (
    EmploymentContractType,
    JobApplicationStatus,
    JobCategory,
    Location,
    LookupMixin,
    SalaryType,
)
from app.models.user import User
from app.schemas.lookup import JobCategoryResponse, LookupCreate, LookupResponse, LookupUpdate

logger = logging.getLogger(__name__)

# (model, column on the referencing table) for lookups that must not be
# deleted while still in use
IN_USE_CHECKS = {
    SalaryType: (Job, Job.salary_type_id),
    EmploymentContractType: (Job, Job.employment_contract_type_id),
    JobApplicationStatus: (JobApplication, JobApplication.job_application_status_id),
}


def _jobs_locations(job: Job) -> List[LookupMixin]:
    return list(job.locations)


def _jobs_categories(job: Job) -> List[LookupMixin]:
    return list(job.categories)


def _jobs_salary_type(job: Job) -> List[LookupMixin]:
    return [job.salary_type] if job.salary_type else []


def _jobs_contract_type(job: Job) -> List[LookupMixin]:
    return [job.employment_contract_type] if job.employment_contract_type else []


def _in_use(db: Session, item: LookupMixin) -> bool:
    check = IN_USE_CHECKS.get(type(item))
    if check is None:
        return False
    model, column = check
    query = db.query(model.id).filter(column == item.id)
    if model is Job:
        query = query.filter(Job.deleted_at.is_(None))
    return query.first() is not None


def build_lookup_router(
    model: Type[LookupMixin],
    prefix: str,
    tag: str,
    singular: str,
    plural: str,
    label: str,
    schema: Type[LookupResponse] = LookupResponse,
    related_to_job: Optional[Callable[[Job], List[LookupMixin]]] = None,
) -> APIRouter:
    """
    Build the CRUD router for one reference table.

    Args:
        model: Lookup model class
        prefix: URL prefix, e.g. "/locations"
        tag: OpenAPI tag
        singular: Envelope key for one row ("location")
        plural: Envelope key for lists ("locations")
        label: Human name used in error messages ("location")
        schema: Response schema
        related_to_job: How to read this lookup's rows for a job; enables GET /jobs/{job_id}
    """
    router = APIRouter(prefix=prefix, tags=[tag])

    def _get_or_404(db: Session, item_id: int) -> LookupMixin:
        item = lookup_crud.get_by_id(db, model, item_id)
        if not item:
            raise NotFoundError(f"{label} not found")
        return item

    @router.get("/")
    def index(
        q: Optional[str] = None,
        order: str = Query("asc", pattern="^(asc|desc)$"),
        pagination: Pagination = Depends(get_pagination),
        db: Session = Depends(get_db),
    ):
        items, total = lookup_crud.get_multi(db, model, pagination, q=q, order=order)
        return success(**{plural: [schema.model_validate(i) for i in items], "totalRecords": total})

    if related_to_job is not None:
        @router.get("/jobs/{job_id}")
        def find_by_job(job_id: int, db: Session = Depends(get_db)):
            job = job_crud.get_by_id(db, job_id)
            if not job:
                raise NotFoundError("job not found")
            items = related_to_job(job)
            return success(**{plural: [schema.model_validate(i) for i in items]})

    @router.get("/{item_id}")
    def find(item_id: int, db: Session = Depends(get_db)):
        return success(**{singular: schema.model_validate(_get_or_404(db, item_id))})

    @router.post("/", status_code=201)
    def create(
        request: LookupCreate,
        db: Session = Depends(get_db),
        recruiter: User = Depends(get_recruiter),
    ):
        if lookup_crud.get_by_name(db, model, request.name):
            raise AppError(f"{label} '{request.name}' already exists", 409)
        try:
            item = lookup_crud.create(db, model, request.model_dump(exclude_unset=True))
        except IntegrityError:
            db.rollback()
            raise AppError(f"{label} '{request.name}' already exists", 409)

        logger.info(f"Recruiter {recruiter.id} created {label} {item.id}: {item.name}")
        return success(**{singular: schema.model_validate(item)})

    @router.put("/{item_id}")
    def update(
        item_id: int,
        request: LookupUpdate,
        db: Session = Depends(get_db),
        recruiter: User = Depends(get_recruiter),
    ):
        item = _get_or_404(db, item_id)
        data = request.model_dump(exclude_unset=True)
        if not data:
            raise AppError(f"{label} details missing", 400)

        if "name" in data:
            existing = lookup_crud.get_by_name(db, model, data["name"])
            if existing and existing.id != item.id:
                raise AppError(f"{label} '{data['name']}' already exists", 409)

        try:
            item = lookup_crud.update(db, item, data)
        except IntegrityError:
            db.rollback()
            raise AppError(f"{label} '{data.get('name')}' already exists", 409)

        logger.info(f"Recruiter {recruiter.id} updated {label} {item.id}")
        return success(**{singular: schema.model_validate(item)})

    @router.delete("/{item_id}")
    def delete(
        item_id: int,
        db: Session = Depends(get_db),
        recruiter: User = Depends(get_recruiter),
    ):
        item = _get_or_404(db, item_id)
        if _in_use(db, item):
            raise AppError(f"{label} is still in use and cannot be deleted", 400)

        lookup_crud.delete(db, item)
        logger.info(f"Recruiter {recruiter.id} deleted {label} {item_id}")
        return success(deleted=1)

    return router


locations_router = build_lookup_router(
    Location, "/locations", "Locations", "location", "locations", "location",
    related_to_job=_jobs_locations,
)
job_categories_router = build_lookup_router(
    JobCategory, "/job-categories", "Job Categories", "category", "categories", "category",
    schema=JobCategoryResponse,
    related_to_job=_jobs_categories,
)
salary_types_router = build_lookup_router(
    SalaryType, "/salary-types", "Salary Types", "salaryType", "salaryTypes", "salary type",
    related_to_job=_jobs_salary_type,
)
employment_contract_types_router = build_lookup_router(
    EmploymentContractType,
    "/employment-contract-types",
    "Employment Contract Types",
    "employmentContractType",
    "employmentContractTypes",
    "employment contract type",
    related_to_job=_jobs_contract_type,
)
job_application_statuses_router = build_lookup_router(
    JobApplicationStatus,
    "/job-application-statuses",
    "Job Application Statuses",
    "jobApplicationStatus",
    "jobApplicationStatuses",
    "job application status",
)

routers = [
    locations_router,
    job_categories_router,
    salary_types_router,
    employment_contract_types_router,
    job_application_statuses_router,
]
