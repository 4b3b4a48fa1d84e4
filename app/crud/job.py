"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer. Every query here
excludes soft-deleted jobs.

Functions that change data only flush; the endpoint owns the transaction
and commits once, so a job and its location/category links are written
together or not at all.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Query, Session, selectinload

from app.core.pagination import Pagination
from app.models.associations import JobsInCategories, JobsInLocations
from app.models.job import Job
from app.services.associations import LinkDiff, remove_all_links, sync_links

SORTABLE_FIELDS = {
    "id": Job.id,
    "title": Job.title,
    "salary": Job.salary,
    "deadline": Job.deadline,
    "created_at": Job.created_at,
}

# Scalar columns a create/update request may set directly
JOB_FIELDS = (
    "title",
    "salary",
    "description",
    "deadline",
    "active",
    "salary_type_id",
    "employment_contract_type_id",
)


def _live(db: Session) -> Query:
    return db.query(Job).filter(Job.deleted_at.is_(None))


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Returns:
        Job instance if found (and not deleted), None otherwise
    """
    return _live(db).filter(Job.id == job_id).first()


def get_post(db: Session, job_id: int) -> Optional[Job]:
    """Retrieve a job with its locations, categories and lookup types eagerly loaded."""
    return (
        _live(db)
        .options(
            selectinload(Job.locations),
            selectinload(Job.categories),
            selectinload(Job.salary_type),
            selectinload(Job.employment_contract_type),
        )
        .filter(Job.id == job_id)
        .first()
    )


def get_multi(
    db: Session,
    pagination: Pagination,
    active: Optional[bool] = None,
    q: Optional[str] = None,
    salary_type_id: Optional[int] = None,
    employment_contract_type_id: Optional[int] = None,
    sort: str = "id",
    order: str = "asc",
) -> Tuple[List[Job], int]:
    """
    Retrieve a page of jobs with optional filtering and sorting.

    Args:
        db: Database session
        pagination: limit/offset to apply
        active: Only active (True) or inactive (False) jobs
        q: Case-insensitive substring match on the title
        salary_type_id: Filter by salary type
        employment_contract_type_id: Filter by contract type
        sort: One of SORTABLE_FIELDS (unknown values fall back to id)
        order: "asc" or "desc"

    Returns:
        (jobs on this page, total number of matching jobs)
    """
    query = _live(db)

    if active is not None:
        query = query.filter(Job.active.is_(active))
    if q:
        query = query.filter(Job.title.ilike(f"%{q}%"))
    if salary_type_id is not None:
        query = query.filter(Job.salary_type_id == salary_type_id)
    if employment_contract_type_id is not None:
        query = query.filter(Job.employment_contract_type_id == employment_contract_type_id)

    total = query.count()

    column = SORTABLE_FIELDS.get(sort, Job.id)
    ordering = column.desc() if order == "desc" else column.asc()
    jobs = query.order_by(ordering, Job.id.asc()).offset(pagination.offset).limit(pagination.limit).all()

    return jobs, total


def get_by_location(db: Session, location_id: int) -> List[Job]:
    return (
        _live(db)
        .join(JobsInLocations, JobsInLocations.job_id == Job.id)
        .filter(JobsInLocations.location_id == location_id)
        .order_by(Job.id)
        .all()
    )


def get_by_category(db: Session, category_id: int) -> List[Job]:
    return (
        _live(db)
        .join(JobsInCategories, JobsInCategories.job_id == Job.id)
        .filter(JobsInCategories.category_id == category_id)
        .order_by(Job.id)
        .all()
    )


def get_by_location_and_category(db: Session, location_id: int, category_id: int) -> List[Job]:
    """Jobs linked to both the given location and the given category."""
    return (
        _live(db)
        .join(JobsInLocations, JobsInLocations.job_id == Job.id)
        .join(JobsInCategories, JobsInCategories.job_id == Job.id)
        .filter(
            JobsInLocations.location_id == location_id,
            JobsInCategories.category_id == category_id,
        )
        .order_by(Job.id)
        .all()
    )


def get_by_salary_type(db: Session, salary_type_id: int) -> List[Job]:
    return _live(db).filter(Job.salary_type_id == salary_type_id).order_by(Job.id).all()


def get_by_employment_contract_type(db: Session, contract_type_id: int) -> List[Job]:
    return _live(db).filter(Job.employment_contract_type_id == contract_type_id).order_by(Job.id).all()


def create(db: Session, data: Dict[str, Any], locations: List[int], categories: List[int]) -> Job:
    """
    Stage a new job and its links (flush only, no commit).

    Args:
        db: Database session
        data: Scalar job fields (see JOB_FIELDS)
        locations: Location ids to link
        categories: Category ids to link

    Returns:
        The new Job with its id assigned
    """
    job = Job(**{key: value for key, value in data.items() if key in JOB_FIELDS})
    db.add(job)
    db.flush()

    sync_links(db, JobsInLocations, "location_id", job.id, locations)
    sync_links(db, JobsInCategories, "category_id", job.id, categories)

    return job


def update(
    db: Session,
    job: Job,
    data: Dict[str, Any],
    locations: Optional[List[int]] = None,
    categories: Optional[List[int]] = None,
) -> Tuple[Optional[LinkDiff], Optional[LinkDiff]]:
    """
    Apply a partial update to a job and reconcile its links (flush only).

    Empty or None `locations`/`categories` leave the existing links untouched.

    Returns:
        (location diff, category diff); None where reconciliation was skipped
    """
    for key, value in data.items():
        if key in JOB_FIELDS:
            setattr(job, key, value)
    db.flush()

    location_diff = sync_links(db, JobsInLocations, "location_id", job.id, locations)
    category_diff = sync_links(db, JobsInCategories, "category_id", job.id, categories)

    return location_diff, category_diff


def soft_delete(db: Session, job: Job) -> None:
    """Mark a job deleted and remove its location/category links (flush only)."""
    job.deleted_at = datetime.now(timezone.utc)
    remove_all_links(db, JobsInLocations, job.id)
    remove_all_links(db, JobsInCategories, job.id)
    db.flush()


def count_active(db: Session) -> int:
    return _live(db).filter(Job.active.is_(True)).count()
