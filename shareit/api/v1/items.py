from typing import Annotated

from fastapi import APIRouter, Query, status

from shareit.api.deps import CurrentUserId, DbSession
from shareit.api.pagination import DEFAULT_SIZE, FromParam, SizeParam
from shareit.schemas.item import (
    CommentCreateRequest,
    CommentResponse,
    ItemCreateRequest,
    ItemDetailResponse,
    ItemResponse,
    ItemUpdateRequest,
)
from shareit.services import item_service

router = APIRouter(prefix="/items", tags=["items"])


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(payload: ItemCreateRequest, user_id: CurrentUserId, db: DbSession) -> ItemResponse:
    return item_service.create_item(db=db, owner_id=user_id, payload=payload)


@router.get("", response_model=list[ItemDetailResponse], status_code=status.HTTP_200_OK)
def list_my_items(
    user_id: CurrentUserId,
    db: DbSession,
    offset: FromParam = 0,
    size: SizeParam = DEFAULT_SIZE,
) -> list[ItemDetailResponse]:
    return item_service.list_owner_items(db=db, owner_id=user_id, offset=offset, limit=size)


@router.get("/search", response_model=list[ItemResponse], status_code=status.HTTP_200_OK)
def search_items(
    db: DbSession,
    text: Annotated[str, Query()] = "",
    offset: FromParam = 0,
    size: SizeParam = DEFAULT_SIZE,
) -> list[ItemResponse]:
    return item_service.search_items(db=db, text=text, offset=offset, limit=size)


@router.get("/{item_id}", response_model=ItemDetailResponse, status_code=status.HTTP_200_OK)
def get_item(item_id: int, user_id: CurrentUserId, db: DbSession) -> ItemDetailResponse:
    return item_service.get_item(db=db, item_id=item_id, user_id=user_id)


@router.patch("/{item_id}", response_model=ItemResponse, status_code=status.HTTP_200_OK)
def update_item(
    item_id: int,
    payload: ItemUpdateRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> ItemResponse:
    return item_service.update_item(db=db, item_id=item_id, owner_id=user_id, payload=payload)


@router.post("/{item_id}/comment", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    item_id: int,
    payload: CommentCreateRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> CommentResponse:
    return item_service.add_comment(db=db, item_id=item_id, author_id=user_id, payload=payload)
