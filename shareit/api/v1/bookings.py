from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import Response

from shareit.api.deps import CurrentUserId, DbSession
from shareit.api.pagination import DEFAULT_SIZE, FromParam, SizeParam
from shareit.schemas.booking import BookingCreateRequest, BookingResponse
from shareit.services.booking_service import (
    create_booking,
    delete_booking,
    get_booking,
    list_booker_bookings,
    list_owner_bookings,
    update_booking_status,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])

StateParam = Annotated[str, Query()]


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create(payload: BookingCreateRequest, user_id: CurrentUserId, db: DbSession) -> BookingResponse:
    return create_booking(
        db=db,
        booker_id=user_id,
        item_id=payload.item_id,
        start=payload.start,
        end=payload.end,
    )


@router.get("", response_model=list[BookingResponse], status_code=status.HTTP_200_OK)
def list_for_booker(
    user_id: CurrentUserId,
    db: DbSession,
    state: StateParam = "ALL",
    offset: FromParam = 0,
    size: SizeParam = DEFAULT_SIZE,
) -> list[BookingResponse]:
    return list_booker_bookings(db=db, booker_id=user_id, state=state, offset=offset, limit=size)


@router.get("/owner", response_model=list[BookingResponse], status_code=status.HTTP_200_OK)
def list_for_owner(
    user_id: CurrentUserId,
    db: DbSession,
    state: StateParam = "ALL",
    offset: FromParam = 0,
    size: SizeParam = DEFAULT_SIZE,
) -> list[BookingResponse]:
    return list_owner_bookings(db=db, owner_id=user_id, state=state, offset=offset, limit=size)


@router.get("/{booking_id}", response_model=BookingResponse, status_code=status.HTTP_200_OK)
def get_by_id(booking_id: int, user_id: CurrentUserId, db: DbSession) -> BookingResponse:
    return get_booking(db=db, booking_id=booking_id, user_id=user_id)


@router.patch("/{booking_id}", response_model=BookingResponse, status_code=status.HTTP_200_OK)
def update_status(
    booking_id: int,
    approved: Annotated[bool, Query()],
    user_id: CurrentUserId,
    db: DbSession,
) -> BookingResponse:
    return update_booking_status(db=db, booking_id=booking_id, approved=approved, user_id=user_id)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(booking_id: int, user_id: CurrentUserId, db: DbSession) -> Response:
    delete_booking(db=db, booking_id=booking_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
