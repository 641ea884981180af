import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shareit.core.exceptions import ConflictError, NotFoundError
from shareit.db.models import User
from shareit.db.session import unit_of_work
from shareit.repositories import users as user_repo
from shareit.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from shareit.services.mappers import to_user_response

logger = logging.getLogger(__name__)


def _email_exists(email: str) -> ConflictError:
    return ConflictError(f"Email already exists: {email}")


def _get_user_or_raise(db: Session, user_id: int) -> User:
    user = user_repo.get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


def create_user(db: Session, payload: UserCreateRequest) -> UserResponse:
    email = payload.email.lower()
    if user_repo.email_taken(db, email):
        raise _email_exists(email)

    user = User(name=payload.name, email=email)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _email_exists(email) from None
    db.refresh(user)
    logger.info("user_created user_id=%s", user.id)
    return to_user_response(user)


def get_user(db: Session, user_id: int) -> UserResponse:
    return to_user_response(_get_user_or_raise(db, user_id))


def list_users(db: Session, offset: int = 0, limit: int = 100) -> list[UserResponse]:
    return [to_user_response(user) for user in user_repo.list_users(db, limit=limit, offset=offset)]


def update_user(db: Session, user_id: int, payload: UserUpdateRequest) -> UserResponse:
    user = _get_user_or_raise(db, user_id)

    if payload.name is not None:
        user.name = payload.name
    if payload.email is not None:
        email = payload.email.lower()
        if email != user.email:
            if user_repo.email_taken(db, email, exclude_user_id=user_id):
                db.rollback()
                raise _email_exists(email)
            user.email = email

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _email_exists(payload.email) from None
    db.refresh(user)
    logger.info("user_updated user_id=%s", user_id)
    return to_user_response(user)


def delete_user(db: Session, user_id: int) -> None:
    with unit_of_work(db):
        user = _get_user_or_raise(db, user_id)
        db.delete(user)
    logger.info("user_deleted user_id=%s", user_id)
