"""Booking workflow: creation, owner decisions, role-based listing and deletion.

Every function takes a SQLAlchemy session plus plain identifiers and returns
response schemas. Business-rule rejections are raised as ``ShareItError``
subclasses and left for the HTTP layer to translate.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shareit.core.clock import as_utc, utcnow
from shareit.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from shareit.core.metrics import BOOKING_DECISIONS, BOOKINGS_CREATED
from shareit.db.locking import item_booking_lock
from shareit.db.models import Booking, BookingState, BookingStatus
from shareit.db.session import unit_of_work
from shareit.repositories import bookings as booking_repo
from shareit.repositories import items as item_repo
from shareit.repositories import users as user_repo
from shareit.schemas.booking import BookingResponse
from shareit.services.mappers import to_booking_response

logger = logging.getLogger(__name__)

BOOKING_NOT_FOUND_DETAIL = "Booking not found"
ITEM_NOT_AVAILABLE_DETAIL = "Item is not available for booking"
OWN_ITEM_DETAIL = "Owner cannot book own item"
START_NULL_DETAIL = "Start date cannot be null"
END_NULL_DETAIL = "End date cannot be null"
START_IN_PAST_DETAIL = "Start date cannot be in the past"
END_NOT_AFTER_START_DETAIL = "Invalid booking dates: end must be after start"
ALREADY_BOOKED_DETAIL = "Item is already booked for this period"
ACCESS_DENIED_DETAIL = "Access denied to booking"
NOT_ITEM_OWNER_DETAIL = "Only item owner can approve/reject booking"
ALREADY_DECIDED_DETAIL = "Booking status already decided"
DELETE_DENIED_DETAIL = "Only booker or item owner can delete booking"


def _user_not_found(user_id: int) -> NotFoundError:
    return NotFoundError(f"User not found with id: {user_id}")


def validate_booking_dates(
    start: datetime | None,
    end: datetime | None,
    now: datetime,
) -> tuple[datetime, datetime]:
    if start is None:
        raise ValidationError(START_NULL_DETAIL)
    if end is None:
        raise ValidationError(END_NULL_DETAIL)

    start = as_utc(start)
    end = as_utc(end)
    if start < now:
        raise ValidationError(START_IN_PAST_DETAIL)
    if end <= start:
        raise ValidationError(END_NOT_AFTER_START_DETAIL)
    return start, end


def create_booking(
    db: Session,
    booker_id: int,
    item_id: int,
    start: datetime | None,
    end: datetime | None,
    now: datetime | None = None,
) -> BookingResponse:
    current_time = as_utc(now) if now else utcnow()

    booker = user_repo.get_user(db, booker_id)
    if booker is None:
        raise _user_not_found(booker_id)

    # the overlap check and the insert must not interleave with another create for the same item
    try:
        with item_booking_lock.hold(item_id), unit_of_work(db):
            item = item_repo.get_item(db, item_id, for_update=True)
            if item is None:
                raise NotFoundError(f"Item not found with id: {item_id}")
            if not item.available:
                raise ValidationError(ITEM_NOT_AVAILABLE_DETAIL)
            if item.owner_id == booker_id:
                raise AccessDeniedError(OWN_ITEM_DETAIL)

            start, end = validate_booking_dates(start, end, current_time)
            if booking_repo.exists_overlapping(db, item_id=item_id, start=start, end=end):
                raise ConflictError(ALREADY_BOOKED_DETAIL)

            booking = Booking(
                start=start,
                end=end,
                item_id=item_id,
                booker_id=booker_id,
                status=BookingStatus.WAITING.value,
            )
            db.add(booking)
    except IntegrityError:
        # ex_bookings_item_period on PostgreSQL
        raise ConflictError(ALREADY_BOOKED_DETAIL) from None

    db.refresh(booking)
    BOOKINGS_CREATED.inc()
    logger.info(
        "booking_created booking_id=%s item_id=%s booker_id=%s",
        booking.id,
        item_id,
        booker_id,
    )
    return to_booking_response(booking, item, booker)


def get_booking(db: Session, booking_id: int, user_id: int) -> BookingResponse:
    row = booking_repo.get_booking_row(db, booking_id)
    if row is None:
        raise NotFoundError(BOOKING_NOT_FOUND_DETAIL)

    booking, item, booker = row
    if user_id not in (booking.booker_id, item.owner_id):
        raise AccessDeniedError(ACCESS_DENIED_DETAIL)
    return to_booking_response(booking, item, booker)


def update_booking_status(db: Session, booking_id: int, approved: bool, user_id: int) -> BookingResponse:
    with unit_of_work(db):
        booking = booking_repo.get_booking(db, booking_id, for_update=True)
        if booking is None:
            raise NotFoundError(BOOKING_NOT_FOUND_DETAIL)

        item = item_repo.get_item(db, booking.item_id)
        if item is None or item.owner_id != user_id:
            raise AccessDeniedError(NOT_ITEM_OWNER_DETAIL)
        if not booking.is_waiting:
            raise ValidationError(ALREADY_DECIDED_DETAIL)

        booking.decide(approved)
        new_status = booking.status

    BOOKING_DECISIONS.labels(status=new_status).inc()
    logger.info(
        "booking_status_updated booking_id=%s status=%s owner_id=%s",
        booking_id,
        new_status,
        user_id,
    )
    booking, item, booker = booking_repo.get_booking_row(db, booking_id)
    return to_booking_response(booking, item, booker)


def list_booker_bookings(
    db: Session,
    booker_id: int,
    state: str,
    offset: int = 0,
    limit: int = 10,
    now: datetime | None = None,
) -> list[BookingResponse]:
    if not user_repo.user_exists(db, booker_id):
        raise _user_not_found(booker_id)

    rows = booking_repo.list_booker_rows(
        db,
        booker_id=booker_id,
        state=BookingState.parse(state),
        now=as_utc(now) if now else utcnow(),
        limit=limit,
        offset=offset,
    )
    return [to_booking_response(booking, item, booker) for booking, item, booker in rows]


def list_owner_bookings(
    db: Session,
    owner_id: int,
    state: str,
    offset: int = 0,
    limit: int = 10,
    now: datetime | None = None,
) -> list[BookingResponse]:
    if not user_repo.user_exists(db, owner_id):
        raise _user_not_found(owner_id)

    rows = booking_repo.list_owner_rows(
        db,
        owner_id=owner_id,
        state=BookingState.parse(state),
        now=as_utc(now) if now else utcnow(),
        limit=limit,
        offset=offset,
    )
    return [to_booking_response(booking, item, booker) for booking, item, booker in rows]


def delete_booking(db: Session, booking_id: int, user_id: int) -> None:
    with unit_of_work(db):
        booking = booking_repo.get_booking(db, booking_id, for_update=True)
        if booking is None:
            raise NotFoundError(BOOKING_NOT_FOUND_DETAIL)

        item = item_repo.get_item(db, booking.item_id)
        owner_id = item.owner_id if item is not None else None
        if user_id not in (booking.booker_id, owner_id):
            raise AccessDeniedError(DELETE_DENIED_DETAIL)

        db.delete(booking)

    logger.info("booking_deleted booking_id=%s user_id=%s", booking_id, user_id)
