"""
Reusable query helpers for user-scoped data isolation.

These functions eliminate repetitive owner filtering across the job store.
"""
from typing import Optional

from sqlalchemy.orm import Session

from .errors import NotFoundError


MAX_RECORD_ID = 2 ** 63 - 1


def parse_record_id(record_id) -> Optional[int]:
    """Return the integer id, or None when the value can't be one."""
    if isinstance(record_id, bool):
        return None
    try:
        parsed = int(str(record_id).strip())
    except (TypeError, ValueError):
        return None
    if not 0 < parsed <= MAX_RECORD_ID:
        return None
    return parsed


def owner_query(db: Session, model, user_id: int):
    """Return a query filtered to the given owner's records."""
    return db.query(model).filter(model.created_by == user_id)


def get_owned_or_404(db: Session, model, record_id, user_id: int, label: str = "Record"):
    """
    Fetch a record by id and owner, or raise NotFoundError.

    A record owned by someone else gets the same error as a missing one.
    """
    parsed_id = parse_record_id(record_id)
    record = None
    if parsed_id is not None:
        record = owner_query(db, model, user_id).filter(model.id == parsed_id).first()
    if not record:
        raise NotFoundError(f"{label} with the id {record_id} does not exist")
    return record
