from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from shareit.db.locking import is_postgresql_session
from shareit.db.models import Item


def get_item(db: Session, item_id: int, for_update: bool = False) -> Item | None:
    query = select(Item).where(Item.id == item_id)
    if for_update and is_postgresql_session(db):
        query = query.with_for_update()
    return db.scalar(query)


def list_owner_items(db: Session, owner_id: int, limit: int, offset: int) -> Sequence[Item]:
    return db.scalars(
        select(Item).where(Item.owner_id == owner_id).order_by(Item.id).limit(limit).offset(offset)
    ).all()


def list_items_for_requests(db: Session, request_ids: Sequence[int]) -> Sequence[Item]:
    if not request_ids:
        return []
    return db.scalars(select(Item).where(Item.request_id.in_(request_ids)).order_by(Item.id)).all()


def search_available_items(db: Session, text: str, limit: int, offset: int) -> Sequence[Item]:
    pattern = f"%{text.lower()}%"
    return db.scalars(
        select(Item)
        .where(
            Item.available.is_(True),
            or_(func.lower(Item.name).like(pattern), func.lower(Item.description).like(pattern)),
        )
        .order_by(Item.id)
        .limit(limit)
        .offset(offset)
    ).all()
