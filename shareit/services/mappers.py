from collections.abc import Iterable

from shareit.core.clock import as_utc
from shareit.db.models import Booking, Comment, Item, ItemRequest, User
from shareit.schemas.booking import BookedItemSummary, BookerSummary, BookingResponse
from shareit.schemas.item import (
    BookingShortResponse,
    CommentResponse,
    ItemDetailResponse,
    ItemResponse,
)
from shareit.schemas.item_request import ItemAnswerResponse, ItemRequestResponse
from shareit.schemas.user import UserResponse


def to_user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email)


def to_booking_response(booking: Booking, item: Item, booker: User) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        start=as_utc(booking.start),
        end=as_utc(booking.end),
        item_id=item.id,
        booker_id=booker.id,
        status=booking.status,
        booker=BookerSummary(id=booker.id, name=booker.name, email=booker.email),
        item=BookedItemSummary(
            id=item.id,
            name=item.name,
            description=item.description,
            available=item.available,
            request_id=item.request_id,
        ),
    )


def to_booking_short(booking: Booking | None) -> BookingShortResponse | None:
    if booking is None:
        return None
    return BookingShortResponse(
        id=booking.id,
        booker_id=booking.booker_id,
        start=as_utc(booking.start),
        end=as_utc(booking.end),
    )


def to_comment_response(comment: Comment, author_name: str) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        text=comment.text,
        author_name=author_name,
        created=as_utc(comment.created),
    )


def to_item_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        available=item.available,
        request_id=item.request_id,
    )


def to_item_detail(
    item: Item,
    comments: Iterable[CommentResponse] = (),
    last_booking: Booking | None = None,
    next_booking: Booking | None = None,
) -> ItemDetailResponse:
    return ItemDetailResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        available=item.available,
        request_id=item.request_id,
        last_booking=to_booking_short(last_booking),
        next_booking=to_booking_short(next_booking),
        comments=list(comments),
    )


def to_item_answer(item: Item) -> ItemAnswerResponse:
    return ItemAnswerResponse(
        id=item.id,
        name=item.name,
        description=item.description,
        available=item.available,
        request_id=item.request_id,
        owner_id=item.owner_id,
    )


def to_item_request_response(item_request: ItemRequest, items: Iterable[Item] = ()) -> ItemRequestResponse:
    return ItemRequestResponse(
        id=item_request.id,
        description=item_request.description,
        requestor_id=item_request.requester_id,
        created=as_utc(item_request.created),
        items=[to_item_answer(item) for item in items],
    )
