import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from shareit.core.clock import as_utc, utcnow
from shareit.core.exceptions import NotFoundError
from shareit.db.models import Item, ItemRequest
from shareit.db.session import unit_of_work
from shareit.repositories import item_requests as item_request_repo
from shareit.repositories import items as item_repo
from shareit.repositories import users as user_repo
from shareit.schemas.item_request import ItemRequestCreateRequest, ItemRequestResponse
from shareit.services.mappers import to_item_request_response

logger = logging.getLogger(__name__)


def _ensure_user_exists(db: Session, user_id: int) -> None:
    if not user_repo.user_exists(db, user_id):
        raise NotFoundError(f"User not found with id: {user_id}")


def _with_answers(db: Session, requests: Sequence[ItemRequest]) -> list[ItemRequestResponse]:
    answers: dict[int, list[Item]] = defaultdict(list)
    for item in item_repo.list_items_for_requests(db, [request.id for request in requests]):
        answers[item.request_id].append(item)
    return [to_item_request_response(request, answers.get(request.id, [])) for request in requests]


def create_item_request(
    db: Session,
    requester_id: int,
    payload: ItemRequestCreateRequest,
    now: datetime | None = None,
) -> ItemRequestResponse:
    _ensure_user_exists(db, requester_id)

    item_request = ItemRequest(
        description=payload.description,
        requester_id=requester_id,
        created=as_utc(now) if now else utcnow(),
    )
    with unit_of_work(db):
        db.add(item_request)
    db.refresh(item_request)
    logger.info("item_request_created request_id=%s requester_id=%s", item_request.id, requester_id)
    return to_item_request_response(item_request)


def get_item_request(db: Session, request_id: int, user_id: int) -> ItemRequestResponse:
    _ensure_user_exists(db, user_id)
    item_request = item_request_repo.get_item_request(db, request_id)
    if item_request is None:
        raise NotFoundError(f"Item request not found with id: {request_id}")
    return _with_answers(db, [item_request])[0]


def list_own_item_requests(db: Session, requester_id: int) -> list[ItemRequestResponse]:
    _ensure_user_exists(db, requester_id)
    return _with_answers(db, item_request_repo.list_requester_requests(db, requester_id))


def list_other_item_requests(
    db: Session,
    user_id: int,
    offset: int = 0,
    limit: int = 10,
) -> list[ItemRequestResponse]:
    _ensure_user_exists(db, user_id)
    requests = item_request_repo.list_other_requests(db, user_id, limit=limit, offset=offset)
    return _with_answers(db, requests)
