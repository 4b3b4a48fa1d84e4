"""
Generic CRUD operations for reference data tables.

Locations, job categories, salary types, employment contract types and
application statuses all share the LookupMixin shape, so one set of
functions parameterised by model serves all of them.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy.orm import Session

from app.core.pagination import Pagination
from app.models.associations import JobsInCategories, JobsInLocations
from app.models.lookups import LookupMixin, Location, JobCategory


def get_by_id(db: Session, model: Type[LookupMixin], item_id: int) -> Optional[LookupMixin]:
    return db.query(model).filter(model.id == item_id).first()


def get_by_name(db: Session, model: Type[LookupMixin], name: str) -> Optional[LookupMixin]:
    return db.query(model).filter(model.name == name).first()


def get_multi(
    db: Session,
    model: Type[LookupMixin],
    pagination: Pagination,
    q: Optional[str] = None,
    order: str = "asc",
) -> Tuple[List[LookupMixin], int]:
    """Page through a lookup table sorted by name. Returns (items, total)."""
    query = db.query(model)
    if q:
        query = query.filter(model.name.ilike(f"%{q}%"))

    total = query.count()
    ordering = model.name.desc() if order == "desc" else model.name.asc()
    items = query.order_by(ordering).offset(pagination.offset).limit(pagination.limit).all()
    return items, total


def find_missing_ids(db: Session, model: Type[LookupMixin], ids: List[int]) -> List[int]:
    """Return the ids from `ids` that have no row in the table."""
    wanted = set(ids)
    if not wanted:
        return []
    found = {row[0] for row in db.query(model.id).filter(model.id.in_(wanted)).all()}
    return sorted(wanted - found)


def _allowed_fields(model: Type[LookupMixin], data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if hasattr(model, key) and key in ("name", "description")}


def create(db: Session, model: Type[LookupMixin], data: Dict[str, Any]) -> LookupMixin:
    item = model(**_allowed_fields(model, data))
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update(db: Session, item: LookupMixin, data: Dict[str, Any]) -> LookupMixin:
    for key, value in _allowed_fields(type(item), data).items():
        setattr(item, key, value)
    db.commit()
    db.refresh(item)
    return item


def delete(db: Session, item: LookupMixin) -> None:
    """
    Delete a lookup row.

    Locations and categories also lose their job links here; the join
    tables are cleaned explicitly rather than relying on database cascades.
    """
    if isinstance(item, Location):
        db.query(JobsInLocations).filter(JobsInLocations.location_id == item.id).delete(synchronize_session=False)
    elif isinstance(item, JobCategory):
        db.query(JobsInCategories).filter(JobsInCategories.category_id == item.id).delete(synchronize_session=False)

    db.delete(item)
    db.commit()
