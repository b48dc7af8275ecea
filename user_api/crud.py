"""Data-access functions for the users table.

Every function takes the caller's session, issues exactly one statement
built from SQLAlchemy constructs (values always travel as bound parameters,
never as SQL text) and leaves the session open for the caller to close.
"""
import logging
from dataclasses import dataclass
from typing import List, Union

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .errors import QueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    user: models.User


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str


FetchResult = Union[Found, NotFound, Failed]


def _query_error(db: Session, operation: str, exc: SQLAlchemyError) -> QueryError:
    db.rollback()
    error = QueryError.from_exception(exc)
    logger.error("%s failed: %s", operation, error)
    return error


def fetch_user(db: Session, user_id: int) -> FetchResult:
    """Look up one user by id.

    Zero rows is an expected outcome and comes back as NotFound rather than
    an exception; only driver failures produce Failed.
    """
    stmt = select(models.User).where(models.User.id == user_id)
    try:
        user = db.execute(stmt).scalar_one_or_none()
    except SQLAlchemyError as exc:
        return Failed(str(_query_error(db, f"fetch_user({user_id})", exc)))

    if user is None:
        return NotFound()
    return Found(user)


def create_user(db: Session, name: str, age: int) -> int:
    """Insert a user and return the id the database assigned to it.

    The id is read back on flush (RETURNING or the last-inserted-id,
    depending on the dialect), so no extra query is needed.

    Raises:
        QueryError: if the insert or the commit fails.
    """
    user = models.User(name=name, age=age)
    db.add(user)
    try:
        db.flush()
        user_id = user.id
        db.commit()
    except SQLAlchemyError as exc:
        raise _query_error(db, "create_user", exc) from exc

    return user_id


def update_user(db: Session, user_id: int, name: str, age: int) -> None:
    """Overwrite name and age of the user with this id.

    Matching zero rows is not an error: the affected row count is not checked.
    """
    stmt = (
        update(models.User)
        .where(models.User.id == user_id)
        .values(name=name, age=age)
        .execution_options(synchronize_session=False)
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        raise _query_error(db, f"update_user({user_id})", exc) from exc


def delete_user(db: Session, user_id: int) -> None:
    """Delete the user with this id; like update, a missing row is fine."""
    stmt = (
        delete(models.User)
        .where(models.User.id == user_id)
        .execution_options(synchronize_session=False)
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        raise _query_error(db, f"delete_user({user_id})", exc) from exc


def list_users(db: Session, offset: int, limit: int) -> List[models.User]:
    """Return up to `limit` users starting at `offset`, ordered by id."""
    stmt = (
        select(models.User)
        .order_by(models.User.id)
        .limit(limit)
        .offset(offset)
    )
    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as exc:
        raise _query_error(db, "list_users", exc) from exc
