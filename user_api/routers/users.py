import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..errors import QueryError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

MAX_USER_ID = schemas.MAX_DB_INT

DEFAULT_START = 0
MAX_COUNT = 10

USER_NOT_FOUND = "User not found"

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    500: {"model": schemas.ErrorResponse},
}


def _to_int(raw: Optional[str], default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def clamp_paging(start: int, count: int) -> Tuple[int, int]:
    """Pull paging values back into range instead of rejecting them."""
    if count < 1 or count > MAX_COUNT:
        count = MAX_COUNT
    if start < 0:
        start = 0
    return start, count


def _user_id_path():
    return Path(..., ge=0, le=MAX_USER_ID, description="Numeric user id.")


@router.get("/users", response_model=List[schemas.UserOut], responses=ERROR_RESPONSES)
def list_users(
    start: Optional[str] = None,
    count: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Return one page of users.

    Bad paging input never errors: non-numbers fall back to the defaults,
    `count` outside 1..10 becomes 10 and a negative `start` becomes 0.
    """
    offset, limit = clamp_paging(
        _to_int(start, DEFAULT_START), _to_int(count, MAX_COUNT)
    )
    try:
        return crud.list_users(db, offset, limit)
    except QueryError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        )


@router.post(
    "/user",
    response_model=schemas.UserOut,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_user(user_in: schemas.UserIn, db: Session = Depends(get_db)):
    try:
        user_id = crud.create_user(db, user_in.name, user_in.age)
    except QueryError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        )

    logger.info("Created user %s", user_id)
    return schemas.UserOut(id=user_id, name=user_in.name, age=user_in.age)


@router.get(
    "/user/{user_id}",
    response_model=schemas.UserOut,
    responses={**ERROR_RESPONSES, 404: {"model": schemas.ErrorResponse}},
)
def get_user(user_id: int = _user_id_path(), db: Session = Depends(get_db)):
    result = crud.fetch_user(db, user_id)
    if isinstance(result, crud.NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    if isinstance(result, crud.Failed):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.reason
        )
    return result.user


@router.put("/user/{user_id}", response_model=schemas.UserOut, responses=ERROR_RESPONSES)
def update_user(
    user_in: schemas.UserIn,
    user_id: int = _user_id_path(),
    db: Session = Depends(get_db),
):
    """Overwrite a user; the id in the path wins over anything in the body.

    The response echoes what was written, it is not re-read from the
    database, and a missing row still answers 200.
    """
    try:
        crud.update_user(db, user_id, user_in.name, user_in.age)
    except QueryError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        )

    return schemas.UserOut(id=user_id, name=user_in.name, age=user_in.age)


@router.delete(
    "/user/{user_id}", response_model=schemas.ResultResponse, responses=ERROR_RESPONSES
)
def delete_user(user_id: int = _user_id_path(), db: Session = Depends(get_db)):
    # Deleting an id that does not exist is still a success.
    try:
        crud.delete_user(db, user_id)
    except QueryError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        )

    return {"result": "success"}
