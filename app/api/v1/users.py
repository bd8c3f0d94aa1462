"""User CRUD endpoints: list, create, get, update and delete by numeric id."""

import json
import re
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.responses import respond_with_json
from app.core.database import get_db
from app.schemas.user import UserPayload, UserResponse
from app.services.users import (
    UserNotFoundError,
    UserStoreError,
    create_user,
    delete_user,
    get_user,
    list_users,
    update_user,
)

router = APIRouter()

USER_ID_PATTERN = re.compile(r"[0-9]+")
# Query integers: optional sign and ASCII digits only; no spaces, underscores or other digit scripts.
QUERY_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Page size bounds for GET /users; out-of-range counts fall back to the max.
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 10

INVALID_USER_ID = "Invalid user ID"
INVALID_PAYLOAD = "Invalid request payload"


def valid_user_id(user_id: str) -> int:
    """Dependency: parse the {user_id} path segment; 400 unless it is all digits."""
    if not USER_ID_PATTERN.fullmatch(user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_USER_ID)
    return int(user_id)


def _parse_int(raw: str | None) -> int:
    # Unparsable values count as 0, which the clamp below then corrects.
    if raw is None or not QUERY_INT_PATTERN.fullmatch(raw):
        return 0
    return int(raw)


def clamp_range(count: int, start: int) -> tuple[int, int]:
    """Return (count, start) with count forced to MAX_PAGE_SIZE outside [1, 10] and start >= 0."""
    if count < MIN_PAGE_SIZE or count > MAX_PAGE_SIZE:
        count = MAX_PAGE_SIZE
    if start < 0:
        start = 0
    return count, start


async def read_user_payload(request: Request) -> UserPayload:
    """Dependency: decode the JSON body into a UserPayload or fail with 400."""
    body = await request.body()
    try:
        return UserPayload.model_validate(json.loads(body))
    except (ValueError, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_PAYLOAD)


def _storage_failure(e: UserStoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.get("/users")
def get_users(
    db: Annotated[Session, Depends(get_db)],
    count: Annotated[str | None, Query()] = None,
    start: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """List users ordered by id. count is clamped to 1..10 (default 10), start to >= 0."""
    page_size, offset = clamp_range(_parse_int(count), _parse_int(start))
    try:
        users = list_users(db, offset, page_size)
    except UserStoreError as e:
        raise _storage_failure(e) from e
    return respond_with_json(
        status.HTTP_200_OK,
        [UserResponse.model_validate(u) for u in users],
    )


@router.post("/user")
def post_user(
    payload: Annotated[UserPayload, Depends(read_user_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Create a user. The database assigns the id; any id in the body is ignored."""
    try:
        user = create_user(db, payload)
    except UserStoreError as e:
        raise _storage_failure(e) from e
    return respond_with_json(status.HTTP_201_CREATED, UserResponse.model_validate(user))


@router.get("/user/{user_id}")
def get_user_by_id(
    uid: Annotated[int, Depends(valid_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Fetch one user; 404 if the id does not exist."""
    try:
        user = get_user(db, uid)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except UserStoreError as e:
        raise _storage_failure(e) from e
    return respond_with_json(status.HTTP_200_OK, UserResponse.model_validate(user))


@router.put("/user/{user_id}")
def put_user(
    uid: Annotated[int, Depends(valid_user_id)],
    payload: Annotated[UserPayload, Depends(read_user_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """
    Replace a user's fields. The path id overrides any id in the body.

    Updating an id that does not exist succeeds without creating a row.
    """
    try:
        user = update_user(db, uid, payload)
    except UserStoreError as e:
        raise _storage_failure(e) from e
    return respond_with_json(status.HTTP_200_OK, UserResponse.model_validate(user))


@router.delete("/user/{user_id}")
def delete_user_by_id(
    uid: Annotated[int, Depends(valid_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Delete a user. Deleting an id that does not exist still succeeds."""
    try:
        delete_user(db, uid)
    except UserStoreError as e:
        raise _storage_failure(e) from e
    return respond_with_json(status.HTTP_200_OK, {"result": "success"})
