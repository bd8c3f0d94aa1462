"""User storage: CRUD against the users table through bound SQLAlchemy statements."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import User
from app.schemas.user import UserPayload

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when a single-user lookup matches no row."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        self.message = "User not found"
        super().__init__(self.message)


class UserStoreError(Exception):
    """Raised when the database rejects or fails a statement."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _store_error(session: Session, action: str, exc: SQLAlchemyError) -> UserStoreError:
    session.rollback()
    message = str(exc.orig) if getattr(exc, "orig", None) is not None else str(exc)
    logger.error("User store %s failed: %s", action, message)
    return UserStoreError(message)


def get_user(session: Session, user_id: int) -> User:
    """Return the user with the given id. Raises UserNotFoundError if there is none."""
    try:
        user = session.query(User).filter(User.id == user_id).first()
    except SQLAlchemyError as e:
        raise _store_error(session, "get", e) from e
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def list_users(session: Session, start: int, count: int) -> list[User]:
    """
    Return up to count users ordered by id, skipping the first start rows.

    Bounds are the caller's responsibility.
    """
    try:
        return (
            session.query(User)
            .order_by(User.id)
            .offset(start)
            .limit(count)
            .all()
        )
    except SQLAlchemyError as e:
        raise _store_error(session, "list", e) from e


def create_user(session: Session, payload: UserPayload) -> User:
    """Insert a user; any id in the payload is ignored. Returns the row with its new id."""
    user = User(name=payload.name, age=payload.age)
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as e:
        raise _store_error(session, "create", e) from e
    return user


def update_user(session: Session, user_id: int, payload: UserPayload) -> User:
    """
    Replace name and age of the user with user_id (last writer wins).

    A missing id is a successful no-op; the submitted values are returned with
    the path id either way.
    """
    try:
        updated = (
            session.query(User)
            .filter(User.id == user_id)
            .update(
                {User.name: payload.name, User.age: payload.age},
                synchronize_session=False,
            )
        )
        session.commit()
    except SQLAlchemyError as e:
        raise _store_error(session, "update", e) from e
    if updated == 0:
        logger.debug("Update matched no user with id=%s", user_id)
    return User(id=user_id, name=payload.name, age=payload.age)


def delete_user(session: Session, user_id: int) -> None:
    """Delete the user with user_id. Deleting a missing id is not an error."""
    try:
        session.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        session.commit()
    except SQLAlchemyError as e:
        raise _store_error(session, "delete", e) from e
