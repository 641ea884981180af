from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from shareit.db.locking import is_postgresql_session
from shareit.db.models import RELEASED_STATUSES, Booking, BookingState, BookingStatus, Item, User

BookingRow = tuple[Booking, Item, User]


def _rows_query() -> Select:
    return (
        select(Booking, Item, User)
        .join(Item, Booking.item_id == Item.id)
        .join(User, Booking.booker_id == User.id)
    )


def _state_clause(state: BookingState, now: datetime):
    if state is BookingState.CURRENT:
        return (Booking.start <= now) & (Booking.end >= now)
    if state is BookingState.PAST:
        return Booking.end < now
    if state is BookingState.FUTURE:
        return Booking.start > now
    if state is BookingState.WAITING:
        return Booking.status == BookingStatus.WAITING.value
    if state is BookingState.REJECTED:
        return Booking.status == BookingStatus.REJECTED.value
    return None


def get_booking(db: Session, booking_id: int, for_update: bool = False) -> Booking | None:
    query = select(Booking).where(Booking.id == booking_id)
    if for_update and is_postgresql_session(db):
        query = query.with_for_update()
    return db.scalar(query)


def get_booking_row(db: Session, booking_id: int) -> BookingRow | None:
    row = db.execute(_rows_query().where(Booking.id == booking_id)).first()
    return tuple(row) if row else None


def exists_overlapping(
    db: Session,
    item_id: int,
    start: datetime,
    end: datetime,
    exclude_booking_id: int | None = None,
) -> bool:
    """True when a booking still holding the item intersects [start, end)."""
    query = select(Booking.id).where(
        Booking.item_id == item_id,
        Booking.status.not_in(RELEASED_STATUSES),
        Booking.start < end,
        Booking.end > start,
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)
    return db.scalar(query.limit(1)) is not None


def list_booker_rows(
    db: Session,
    booker_id: int,
    state: BookingState,
    now: datetime,
    limit: int,
    offset: int,
) -> Sequence[BookingRow]:
    query = _rows_query().where(Booking.booker_id == booker_id)
    return _list_rows(db, query, state, now, limit, offset)


def list_owner_rows(
    db: Session,
    owner_id: int,
    state: BookingState,
    now: datetime,
    limit: int,
    offset: int,
) -> Sequence[BookingRow]:
    query = _rows_query().where(Item.owner_id == owner_id)
    return _list_rows(db, query, state, now, limit, offset)


def _list_rows(
    db: Session,
    query: Select,
    state: BookingState,
    now: datetime,
    limit: int,
    offset: int,
) -> Sequence[BookingRow]:
    clause = _state_clause(state, now)
    if clause is not None:
        query = query.where(clause)
    rows = db.execute(query.order_by(Booking.start.desc(), Booking.id.desc()).limit(limit).offset(offset)).all()
    return [tuple(row) for row in rows]


def last_approved_bookings(db: Session, item_ids: Sequence[int], now: datetime) -> dict[int, Booking]:
    """Latest finished approved booking per item."""
    if not item_ids:
        return {}
    bookings = db.scalars(
        select(Booking)
        .where(
            Booking.item_id.in_(item_ids),
            Booking.status == BookingStatus.APPROVED.value,
            Booking.end < now,
        )
        .order_by(Booking.end.desc(), Booking.id.desc())
    ).all()
    result: dict[int, Booking] = {}
    for booking in bookings:
        result.setdefault(booking.item_id, booking)
    return result


def next_approved_bookings(db: Session, item_ids: Sequence[int], now: datetime) -> dict[int, Booking]:
    """Earliest upcoming approved booking per item."""
    if not item_ids:
        return {}
    bookings = db.scalars(
        select(Booking)
        .where(
            Booking.item_id.in_(item_ids),
            Booking.status == BookingStatus.APPROVED.value,
            Booking.start > now,
        )
        .order_by(Booking.start, Booking.id)
    ).all()
    result: dict[int, Booking] = {}
    for booking in bookings:
        result.setdefault(booking.item_id, booking)
    return result


def has_completed_approved_booking(db: Session, item_id: int, booker_id: int, now: datetime) -> bool:
    query = select(Booking.id).where(
        Booking.item_id == item_id,
        Booking.booker_id == booker_id,
        Booking.status == BookingStatus.APPROVED.value,
        Booking.end < now,
    )
    return db.scalar(query.limit(1)) is not None
