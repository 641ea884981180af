from collections.abc import Sequence

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from shareit.db.models import User


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def user_exists(db: Session, user_id: int) -> bool:
    return bool(db.scalar(select(exists().where(User.id == user_id))))


def email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    return db.scalar(query.limit(1)) is not None


def list_users(db: Session, limit: int, offset: int) -> Sequence[User]:
    return db.scalars(select(User).order_by(User.id).limit(limit).offset(offset)).all()
