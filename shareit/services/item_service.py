import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shareit.core.clock import as_utc, utcnow
from shareit.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from shareit.db.models import Comment, Item
from shareit.db.session import unit_of_work
from shareit.repositories import bookings as booking_repo
from shareit.repositories import comments as comment_repo
from shareit.repositories import item_requests as item_request_repo
from shareit.repositories import items as item_repo
from shareit.repositories import users as user_repo
from shareit.schemas.item import (
    CommentCreateRequest,
    CommentResponse,
    ItemCreateRequest,
    ItemDetailResponse,
    ItemResponse,
    ItemUpdateRequest,
)
from shareit.services.mappers import to_comment_response, to_item_detail, to_item_response

logger = logging.getLogger(__name__)

NOT_ITEM_OWNER_DETAIL = "Only owner can update item"
NO_COMPLETED_BOOKING_DETAIL = "User has not completed booking of this item"
ALREADY_COMMENTED_DETAIL = "User has already commented this item"


def _ensure_user_exists(db: Session, user_id: int) -> None:
    if not user_repo.user_exists(db, user_id):
        raise NotFoundError(f"User not found with id: {user_id}")


def _get_item_or_raise(db: Session, item_id: int) -> Item:
    item = item_repo.get_item(db, item_id)
    if item is None:
        raise NotFoundError(f"Item not found with id: {item_id}")
    return item


def _comments_by_item(db: Session, item_ids: Sequence[int]) -> dict[int, list[CommentResponse]]:
    grouped: dict[int, list[CommentResponse]] = defaultdict(list)
    for comment, author_name in comment_repo.list_item_comments(db, item_ids):
        grouped[comment.item_id].append(to_comment_response(comment, author_name))
    return grouped


def create_item(db: Session, owner_id: int, payload: ItemCreateRequest) -> ItemResponse:
    _ensure_user_exists(db, owner_id)
    if payload.request_id is not None and item_request_repo.get_item_request(db, payload.request_id) is None:
        raise NotFoundError(f"Item request not found with id: {payload.request_id}")

    item = Item(
        name=payload.name,
        description=payload.description,
        available=payload.available,
        owner_id=owner_id,
        request_id=payload.request_id,
    )
    with unit_of_work(db):
        db.add(item)
    db.refresh(item)
    logger.info("item_created item_id=%s owner_id=%s", item.id, owner_id)
    return to_item_response(item)


def update_item(db: Session, item_id: int, owner_id: int, payload: ItemUpdateRequest) -> ItemResponse:
    _ensure_user_exists(db, owner_id)
    with unit_of_work(db):
        item = _get_item_or_raise(db, item_id)
        if item.owner_id != owner_id:
            raise AccessDeniedError(NOT_ITEM_OWNER_DETAIL)

        if payload.name is not None:
            item.name = payload.name
        if payload.description is not None:
            item.description = payload.description
        if payload.available is not None:
            item.available = payload.available

    db.refresh(item)
    logger.info("item_updated item_id=%s owner_id=%s", item_id, owner_id)
    return to_item_response(item)


def get_item(db: Session, item_id: int, user_id: int, now: datetime | None = None) -> ItemDetailResponse:
    """Item with its comments; booking neighbours are only shown to the owner."""
    item = _get_item_or_raise(db, item_id)
    comments = _comments_by_item(db, [item.id]).get(item.id, [])

    if item.owner_id != user_id:
        return to_item_detail(item, comments)

    current_time = as_utc(now) if now else utcnow()
    last = booking_repo.last_approved_bookings(db, [item.id], current_time).get(item.id)
    upcoming = booking_repo.next_approved_bookings(db, [item.id], current_time).get(item.id)
    return to_item_detail(item, comments, last_booking=last, next_booking=upcoming)


def list_owner_items(
    db: Session,
    owner_id: int,
    offset: int = 0,
    limit: int = 10,
    now: datetime | None = None,
) -> list[ItemDetailResponse]:
    _ensure_user_exists(db, owner_id)
    items = item_repo.list_owner_items(db, owner_id, limit=limit, offset=offset)
    item_ids = [item.id for item in items]

    current_time = as_utc(now) if now else utcnow()
    comments = _comments_by_item(db, item_ids)
    last = booking_repo.last_approved_bookings(db, item_ids, current_time)
    upcoming = booking_repo.next_approved_bookings(db, item_ids, current_time)
    return [
        to_item_detail(
            item,
            comments.get(item.id, []),
            last_booking=last.get(item.id),
            next_booking=upcoming.get(item.id),
        )
        for item in items
    ]


def search_items(db: Session, text: str, offset: int = 0, limit: int = 10) -> list[ItemResponse]:
    text = text.strip()
    if not text:
        return []
    return [to_item_response(item) for item in item_repo.search_available_items(db, text, limit=limit, offset=offset)]


def add_comment(
    db: Session,
    item_id: int,
    author_id: int,
    payload: CommentCreateRequest,
    now: datetime | None = None,
) -> CommentResponse:
    author = user_repo.get_user(db, author_id)
    if author is None:
        raise NotFoundError(f"User not found with id: {author_id}")
    _get_item_or_raise(db, item_id)

    current_time = as_utc(now) if now else utcnow()
    if not booking_repo.has_completed_approved_booking(db, item_id, author_id, current_time):
        raise ValidationError(NO_COMPLETED_BOOKING_DETAIL)
    if comment_repo.has_commented(db, item_id, author_id):
        raise ValidationError(ALREADY_COMMENTED_DETAIL)

    comment = Comment(text=payload.text, item_id=item_id, author_id=author_id, created=current_time)
    db.add(comment)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError(ALREADY_COMMENTED_DETAIL) from None
    db.refresh(comment)
    logger.info("comment_added comment_id=%s item_id=%s author_id=%s", comment.id, item_id, author_id)
    return to_comment_response(comment, author.name)
