from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from shareit.db.models import ItemRequest


def get_item_request(db: Session, request_id: int) -> ItemRequest | None:
    return db.get(ItemRequest, request_id)


def list_requester_requests(db: Session, requester_id: int) -> Sequence[ItemRequest]:
    return db.scalars(
        select(ItemRequest)
        .where(ItemRequest.requester_id == requester_id)
        .order_by(ItemRequest.created.desc(), ItemRequest.id.desc())
    ).all()


def list_other_requests(db: Session, requester_id: int, limit: int, offset: int) -> Sequence[ItemRequest]:
    return db.scalars(
        select(ItemRequest)
        .where(ItemRequest.requester_id != requester_id)
        .order_by(ItemRequest.created.desc(), ItemRequest.id.desc())
        .limit(limit)
        .offset(offset)
    ).all()
