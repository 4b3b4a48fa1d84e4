import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_recruiter
from app.core.errors import AppError, NotFoundError
from app.core.pagination import Pagination, get_pagination
from app.core.responses import success
from app.crud import job as job_crud
from app.crud import job_application as application_crud
from app.crud import lookup as lookup_crud
from app.models.lookups import (
    EmploymentContractType,
    JobCategory,
    Location,
    SalaryType,
)
from app.models.user import User
from app.schemas.job import JobCreateRequest, JobPostResponse, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def _jobs(jobs) -> list:
    return [JobResponse.model_validate(job) for job in jobs]


def _check_references(
    db: Session,
    salary_type_id: Optional[int] = None,
    employment_contract_type_id: Optional[int] = None,
    locations: Optional[list] = None,
    categories: Optional[list] = None,
) -> None:
    """Reject ids that do not point at existing reference rows (400) before anything is written."""
    if salary_type_id is not None and not lookup_crud.get_by_id(db, SalaryType, salary_type_id):
        raise AppError(f"salary type {salary_type_id} does not exist", 400)
    if employment_contract_type_id is not None and not lookup_crud.get_by_id(
        db, EmploymentContractType, employment_contract_type_id
    ):
        raise AppError(f"employment contract type {employment_contract_type_id} does not exist", 400)

    missing_locations = lookup_crud.find_missing_ids(db, Location, locations or [])
    if missing_locations:
        raise AppError(f"unknown location id(s): {missing_locations}", 400)
    missing_categories = lookup_crud.find_missing_ids(db, JobCategory, categories or [])
    if missing_categories:
        raise AppError(f"unknown category id(s): {missing_categories}", 400)


@router.get("/")
def list_jobs(
    active: Optional[bool] = None,
    q: Optional[str] = None,
    salary_type_id: Optional[int] = None,
    employment_contract_type_id: Optional[int] = None,
    sort: str = Query("id", pattern="^(id|title|salary|deadline|created_at)$"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """
    List jobs with filtering, sorting and pagination.

    `totalRecords` is the number of jobs matching the filters, across all pages.
    """
    jobs, total = job_crud.get_multi(
        db,
        pagination,
        active=active,
        q=q,
        salary_type_id=salary_type_id,
        employment_contract_type_id=employment_contract_type_id,
        sort=sort,
        order=order,
    )
    return success(jobs=_jobs(jobs), totalRecords=total)


@router.get("/locations/{location_id}/categories/{category_id}")
def find_by_location_and_category(location_id: int, category_id: int, db: Session = Depends(get_db)):
    """Jobs available at a location in a given category."""
    if not lookup_crud.get_by_id(db, Location, location_id):
        raise NotFoundError("we couldn't find that location")
    if not lookup_crud.get_by_id(db, JobCategory, category_id):
        raise NotFoundError("we couldn't find that category")

    jobs = job_crud.get_by_location_and_category(db, location_id, category_id)
    return success(jobs=_jobs(jobs))


@router.get("/locations/{location_id}")
def find_by_location(location_id: int, db: Session = Depends(get_db)):
    if not lookup_crud.get_by_id(db, Location, location_id):
        raise NotFoundError("we couldn't find that location")
    return success(jobs=_jobs(job_crud.get_by_location(db, location_id)))


@router.get("/categories/{category_id}")
def find_by_category(category_id: int, db: Session = Depends(get_db)):
    if not lookup_crud.get_by_id(db, JobCategory, category_id):
        raise NotFoundError("we couldn't find that category")
    return success(jobs=_jobs(job_crud.get_by_category(db, category_id)))


@router.get("/salary-types/{salary_type_id}")
def find_by_salary_type(salary_type_id: int, db: Session = Depends(get_db)):
    if not lookup_crud.get_by_id(db, SalaryType, salary_type_id):
        raise NotFoundError("we couldn't find that salary type")
    return success(jobs=_jobs(job_crud.get_by_salary_type(db, salary_type_id)))


@router.get("/employment-contract-types/{contract_type_id}")
def find_by_employment_contract_type(contract_type_id: int, db: Session = Depends(get_db)):
    if not lookup_crud.get_by_id(db, EmploymentContractType, contract_type_id):
        raise NotFoundError("we couldn't find that employment contract type")
    return success(jobs=_jobs(job_crud.get_by_employment_contract_type(db, contract_type_id)))


@router.get("/job-applications/{application_id}")
def find_by_job_application(
    application_id: int,
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    """The job an application was made for."""
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("application not found")

    job = job_crud.get_by_id(db, application.job_id)
    if not job:
        raise NotFoundError("job not found")
    return success(job=JobResponse.model_validate(job))


@router.get("/{job_id}/post")
def get_post(job_id: int, db: Session = Depends(get_db)):
    """A job with its locations, categories, salary type and contract type, for the job page."""
    job = job_crud.get_post(db, job_id)
    if not job:
        raise NotFoundError("job posting not found")
    return success(job=JobPostResponse.model_validate(job))


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("job not found")
    return success(job=JobResponse.model_validate(job))


@router.post("/", status_code=201)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    """
    Create a job and link it to its locations and categories.

    All validation happens before the first write; the job and its links are
    committed in a single transaction.
    """
    if not request.locations or not request.categories:
        raise AppError("missing job location and/or category", 400)
    if not request.employment_contract_type_id or not request.salary_type_id:
        raise AppError("missing job salary type and/or contract type", 400)

    _check_references(
        db,
        salary_type_id=request.salary_type_id,
        employment_contract_type_id=request.employment_contract_type_id,
        locations=request.locations,
        categories=request.categories,
    )

    data = request.model_dump(exclude={"locations", "categories"})
    try:
        job = job_crud.create(db, data, request.locations, request.categories)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise AppError("error - unable to create job", 500, is_operational=False)

    db.refresh(job)
    logger.info(f"Recruiter {recruiter.id} created job {job.id}: {job.title}")
    return success(job=JobResponse.model_validate(job))


@router.put("/{job_id}")
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    """
    Update a job.

    Scalar fields are updated when present. `locations` and `categories`
    replace the job's links with exactly the given ids, adding and removing
    only what differs; an empty or omitted list leaves the links as they are.
    Everything is committed in one transaction.
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("job not found")

    data = request.model_dump(exclude_unset=True, exclude={"locations", "categories"})
    if not data and not request.locations and not request.categories:
        raise AppError("missing job details", 400)

    _check_references(
        db,
        salary_type_id=data.get("salary_type_id"),
        employment_contract_type_id=data.get("employment_contract_type_id"),
        locations=request.locations,
        categories=request.categories,
    )

    try:
        location_diff, category_diff = job_crud.update(
            db, job, data, locations=request.locations, categories=request.categories
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e}")
        raise AppError("error - unable to update job", 500, is_operational=False)

    db.refresh(job)
    logger.info(
        f"Recruiter {recruiter.id} updated job {job.id} "
        f"(locations: {location_diff}, categories: {category_diff})"
    )
    return success(job=JobResponse.model_validate(job))


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    recruiter: User = Depends(get_recruiter),
):
    """Soft-delete a job and remove all of its location/category links."""
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("job not found")

    try:
        job_crud.soft_delete(db, job)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting job {job_id}: {e}")
        raise AppError("error - unable to delete job", 500, is_operational=False)

    logger.info(f"Recruiter {recruiter.id} deleted job {job_id}")
    return success(deleted=1)
