"""
Reconciliation of a job's many-to-many links (locations, categories).

Given the foreign ids currently linked to a job and a target list supplied by
the caller, compute the minimal set of join rows to insert and delete so the
stored links equal the target. Links present in both are left untouched.

An empty target means "no change requested": the caller skips
reconciliation entirely instead of removing every link.

apply_link_diff() only stages inserts/deletes on the session; committing (or
rolling back) is left to the caller, so a job update and both of its
reconciliations succeed or fail as one transaction.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Sequence, Type

from sqlalchemy.orm import Session

from app.core.database import Base

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkDiff:
    """Links to add and remove; the two sets never overlap."""
    to_add: FrozenSet[int] = field(default_factory=frozenset)
    to_remove: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def normalize_ids(ids: Iterable) -> FrozenSet[int]:
    """
    Coerce ids to ints and collapse duplicates.

    Raises:
        ValueError: If an id is not an integer (or integer string)
    """
    return frozenset(int(i) for i in ids)


def reconcile(current: Iterable[int], target: Iterable[int]) -> LinkDiff:
    """
    Compute the link changes needed to move `current` to `target`.

    Args:
        current: Foreign ids currently linked (as stored)
        target: Requested foreign ids; duplicates are allowed

    Returns:
        LinkDiff with to_add = target - current and to_remove = current - target
    """
    have = normalize_ids(current)
    wanted = normalize_ids(target)
    return LinkDiff(to_add=wanted - have, to_remove=have - wanted)


def current_link_ids(db: Session, link_model: Type[Base], foreign_key: str, job_id: int) -> FrozenSet[int]:
    """Fetch the foreign ids linked to a job straight from the join table."""
    column = getattr(link_model, foreign_key)
    rows = db.query(column).filter(link_model.job_id == job_id).all()
    return frozenset(row[0] for row in rows)


def apply_link_diff(
    db: Session,
    link_model: Type[Base],
    foreign_key: str,
    job_id: int,
    diff: LinkDiff,
) -> None:
    """Stage the inserts and deletes described by `diff` on the session (no commit)."""
    column = getattr(link_model, foreign_key)

    if diff.to_remove:
        db.query(link_model).filter(
            link_model.job_id == job_id,
            column.in_(diff.to_remove),
        ).delete(synchronize_session=False)

    for foreign_id in sorted(diff.to_add):
        db.add(link_model(job_id=job_id, **{foreign_key: foreign_id}))

    # Flush now so a second sync in the same transaction sees these rows
    db.flush()


def sync_links(
    db: Session,
    link_model: Type[Base],
    foreign_key: str,
    job_id: int,
    target: Optional[Sequence[int]],
) -> Optional[LinkDiff]:
    """
    Reconcile a job's links in one join table against `target`.

    Returns:
        The applied LinkDiff, or None when target is empty/None and
        reconciliation was skipped
    """
    if not target:
        return None

    current = current_link_ids(db, link_model, foreign_key, job_id)
    diff = reconcile(current, target)
    if not diff.is_empty:
        apply_link_diff(db, link_model, foreign_key, job_id, diff)
        logger.info(
            f"Job {job_id} {link_model.__tablename__}: "
            f"+{sorted(diff.to_add)} -{sorted(diff.to_remove)}"
        )
    return diff


def remove_all_links(db: Session, link_model: Type[Base], job_id: int) -> int:
    """Delete every join row owned by a job (no commit). Returns the number of rows removed."""
    return db.query(link_model).filter(link_model.job_id == job_id).delete(synchronize_session=False)
