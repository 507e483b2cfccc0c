"""
TripLink Backend — Persistence Accessor
=========================================

What:  Typed helpers the domain services use to read and write the store.
How:   Thin functions over an AsyncSession. Every call suspends at the
       database round-trip; nothing here holds application-level locks.

Helpers:
    get_or_404()          — primary-key fetch, NotFoundError when absent
    ensure_exists()       — foreign-key check before a write
    iterate()             — lazy async iteration over a SELECT
    conditional_update()  — UPDATE ... WHERE id = :id AND <column> IN (:expected)
    store_errors()        — translates SQLAlchemy errors into TripLinkErrors

Conditional updates:
    The store serializes concurrent writers on one row. When two requests try
    to move a booking out of 'pending', the second UPDATE re-evaluates its
    WHERE clause after the first commits, matches zero rows, and the caller
    reports a conflict.
"""

import logging
from contextlib import contextmanager
from typing import Any, AsyncIterator, Dict, Iterable, Iterator, Optional, Type, TypeVar

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from triplink.database import Base
from triplink.exceptions import ConflictError, InternalError, NotFoundError, TripLinkError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Wrap a block of store calls so only TripLinkErrors escape.

    Usage:
        with store_errors("create service"):
            db.add(service)
            await db.flush()
    """
    try:
        yield
    except TripLinkError:
        raise
    except IntegrityError as e:
        logger.warning("Integrity violation during %s: %s", operation, e.orig)
        raise ConflictError(
            message="The request conflicts with an existing record",
            context={"operation": operation},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise InternalError(context={"operation": operation, "error_type": type(e).__name__}) from e


async def get_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: int,
    resource: Optional[str] = None,
    *,
    refresh: bool = False,
) -> ModelT:
    """Fetch a row by primary key or raise NotFoundError."""
    with store_errors(f"get {model.__tablename__}"):
        obj = await db.get(model, row_id, populate_existing=refresh)
    if obj is None:
        raise NotFoundError(resource=resource or model.__name__.lower(), resource_id=row_id)
    return obj


async def ensure_exists(
    db: AsyncSession,
    model: Type[ModelT],
    row_ids: Iterable[int],
    resource: Optional[str] = None,
) -> None:
    """Raise NotFoundError for the first id in row_ids with no matching row."""
    wanted = list(dict.fromkeys(row_ids))
    if not wanted:
        return
    with store_errors(f"check {model.__tablename__}"):
        result = await db.execute(select(model.id).where(model.id.in_(wanted)))
        found = set(result.scalars().all())
    for row_id in wanted:
        if row_id not in found:
            raise NotFoundError(resource=resource or model.__name__.lower(), resource_id=row_id)


async def iterate(db: AsyncSession, stmt: Select) -> AsyncIterator[Any]:
    """
    Execute stmt and yield ORM rows one at a time.

    Each call runs the query afresh, so the iterator is restartable by
    calling the producing function again.
    """
    with store_errors("list"):
        result = await db.execute(stmt)
    for row in result.scalars():
        yield row


async def conditional_update(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: int,
    column: Any,
    expected: Iterable[str],
    values: Dict[str, Any],
) -> bool:
    """
    Apply values to one row only if `column` currently holds one of `expected`.

    Returns:
        True when exactly one row was updated, False when the row is missing
        or its column held some other value.
    """
    stmt = (
        update(model)
        .where(model.id == row_id, column.in_(list(expected)))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    with store_errors(f"update {model.__tablename__}"):
        result = await db.execute(stmt)
    return result.rowcount == 1
