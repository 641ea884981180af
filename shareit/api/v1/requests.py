from fastapi import APIRouter, status

from shareit.api.deps import CurrentUserId, DbSession
from shareit.api.pagination import DEFAULT_SIZE, FromParam, SizeParam
from shareit.schemas.item_request import ItemRequestCreateRequest, ItemRequestResponse
from shareit.services import item_request_service

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("", response_model=ItemRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    payload: ItemRequestCreateRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> ItemRequestResponse:
    return item_request_service.create_item_request(db=db, requester_id=user_id, payload=payload)


@router.get("", response_model=list[ItemRequestResponse], status_code=status.HTTP_200_OK)
def list_my_requests(user_id: CurrentUserId, db: DbSession) -> list[ItemRequestResponse]:
    return item_request_service.list_own_item_requests(db=db, requester_id=user_id)


@router.get("/all", response_model=list[ItemRequestResponse], status_code=status.HTTP_200_OK)
def list_other_requests(
    user_id: CurrentUserId,
    db: DbSession,
    offset: FromParam = 0,
    size: SizeParam = DEFAULT_SIZE,
) -> list[ItemRequestResponse]:
    return item_request_service.list_other_item_requests(db=db, user_id=user_id, offset=offset, limit=size)


@router.get("/{request_id}", response_model=ItemRequestResponse, status_code=status.HTTP_200_OK)
def get_request(request_id: int, user_id: CurrentUserId, db: DbSession) -> ItemRequestResponse:
    return item_request_service.get_item_request(db=db, request_id=request_id, user_id=user_id)
