"""Owner-scoped persistence helpers shared by the todo and category services."""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.exceptions import ConstraintViolation, NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")


def owned(db: Session, model: Type[T], owner_id: str) -> Query:
    """Base query restricted to one owner's rows."""
    return db.query(model).filter(model.owner_id == owner_id)


def find_by_id(db: Session, model: Type[T], entity_id: str, owner_id: str) -> Optional[T]:
    """Row with this id belonging to owner_id, or None; other owners' rows are invisible."""
    return owned(db, model, owner_id).filter(model.id == entity_id).first()


def get_or_404(db: Session, model: Type[T], entity_id: str, owner_id: str, label: str) -> T:
    obj = find_by_id(db, model, entity_id, owner_id)
    if obj is None:
        raise NotFound(f"{label} not found")
    return obj


def find_many(
    db: Session,
    model: Type[T],
    owner_id: str,
    criteria: Iterable[Any] = (),
    order_by: Sequence[Any] = (),
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[T]:
    query = owned(db, model, owner_id).filter(*criteria).order_by(*order_by)
    if skip:
        query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count(db: Session, model: Type[T], owner_id: str, criteria: Iterable[Any] = ()) -> int:
    return (
        db.query(func.count(model.id))
        .filter(model.owner_id == owner_id)
        .filter(*criteria)
        .scalar()
    ) or 0


def insert(db: Session, obj: T) -> T:
    """Stage a new row and flush so constraint failures surface here."""
    db.add(obj)
    flush(db)
    return obj


def delete(db: Session, obj: Any) -> None:
    db.delete(obj)
    flush(db)


def flush(db: Session) -> None:
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Constraint violation on flush: {e.orig}")
        raise ConstraintViolation(_describe(e)) from e


def commit(db: Session) -> None:
    """Commit the unit of work; nothing is persisted if this raises."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Constraint violation on commit: {e.orig}")
        raise ConstraintViolation(_describe(e)) from e


def _describe(error: IntegrityError) -> str:
    text = str(error.orig).lower()
    if "unique" in text or "duplicate" in text:
        return "A record with these values already exists"
    return "Database constraint violated"
