from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shareit.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from shareit.db.models import Booking, BookingStatus, Item, User
from shareit.services.booking_service import (
    create_booking,
    delete_booking,
    get_booking,
    list_booker_bookings,
    list_owner_bookings,
    update_booking_status,
)

NOW = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)


def _seed_owner_booker_item(db: Session, available: bool = True) -> tuple[User, User, Item]:
    owner = User(name="Owner", email="owner@example.com")
    booker = User(name="Booker", email="booker@example.com")
    db.add_all([owner, booker])
    db.flush()
    item = Item(name="Drill", description="Cordless drill", available=available, owner_id=owner.id)
    db.add(item)
    db.commit()
    return owner, booker, item


def _add_booking(
    db: Session,
    item: Item,
    booker: User,
    start: datetime,
    end: datetime,
    status: BookingStatus = BookingStatus.WAITING,
) -> Booking:
    booking = Booking(start=start, end=end, item_id=item.id, booker_id=booker.id, status=status.value)
    db.add(booking)
    db.commit()
    return booking


def _booking_count(db: Session) -> int:
    return db.scalar(select(func.count(Booking.id)))


def test_create_booking_starts_waiting(db):
    _, booker, item = _seed_owner_booker_item(db)

    booking = create_booking(
        db,
        booker_id=booker.id,
        item_id=item.id,
        start=NOW + timedelta(days=1),
        end=NOW + timedelta(days=2),
        now=NOW,
    )

    assert booking.status == BookingStatus.WAITING.value
    assert booking.booker.id == booker.id
    assert booking.item.id == item.id
    assert booking.start == NOW + timedelta(days=1)
    assert booking.end == NOW + timedelta(days=2)


def test_overlapping_booking_is_rejected(db):
    _, booker, item = _seed_owner_booker_item(db)
    create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    with pytest.raises(ConflictError) as exc_info:
        create_booking(
            db,
            booker.id,
            item.id,
            NOW + timedelta(days=1, hours=12),
            NOW + timedelta(days=2, hours=12),
            now=NOW,
        )

    assert "already booked for this period" in exc_info.value.message
    assert isinstance(exc_info.value, ValidationError)
    assert _booking_count(db) == 1


def test_adjacent_booking_does_not_overlap(db):
    _, booker, item = _seed_owner_booker_item(db)
    create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    second = create_booking(db, booker.id, item.id, NOW + timedelta(days=2), NOW + timedelta(days=3), now=NOW)

    assert second.status == BookingStatus.WAITING.value
    assert _booking_count(db) == 2


def test_rejected_booking_releases_the_period(db):
    _, booker, item = _seed_owner_booker_item(db)
    _add_booking(
        db,
        item,
        booker,
        NOW + timedelta(days=1),
        NOW + timedelta(days=2),
        status=BookingStatus.REJECTED,
    )

    booking = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    assert booking.status == BookingStatus.WAITING.value


def test_approve_then_second_decision_fails(db):
    owner, booker, item = _seed_owner_booker_item(db)
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    approved = update_booking_status(db, created.id, approved=True, user_id=owner.id)
    assert approved.status == BookingStatus.APPROVED.value

    with pytest.raises(ValidationError) as exc_info:
        update_booking_status(db, created.id, approved=False, user_id=owner.id)

    assert exc_info.value.message == "Booking status already decided"
    assert get_booking(db, created.id, owner.id).status == BookingStatus.APPROVED.value


def test_reject_sets_rejected_status(db):
    owner, booker, item = _seed_owner_booker_item(db)
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    rejected = update_booking_status(db, created.id, approved=False, user_id=owner.id)

    assert rejected.status == BookingStatus.REJECTED.value


def test_booker_cannot_decide_own_booking(db):
    _, booker, item = _seed_owner_booker_item(db)
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    with pytest.raises(AccessDeniedError):
        update_booking_status(db, created.id, approved=True, user_id=booker.id)

    assert get_booking(db, created.id, booker.id).status == BookingStatus.WAITING.value


def test_booker_cannot_decide_even_after_approval(db):
    owner, booker, item = _seed_owner_booker_item(db)
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)
    update_booking_status(db, created.id, approved=True, user_id=owner.id)

    with pytest.raises(AccessDeniedError):
        update_booking_status(db, created.id, approved=False, user_id=booker.id)


def test_update_missing_booking_is_not_found(db):
    owner, _, _ = _seed_owner_booker_item(db)

    with pytest.raises(NotFoundError):
        update_booking_status(db, 999, approved=True, user_id=owner.id)


def test_start_in_past_is_rejected(db):
    _, booker, item = _seed_owner_booker_item(db)

    with pytest.raises(ValidationError) as exc_info:
        create_booking(db, booker.id, item.id, NOW - timedelta(hours=1), NOW + timedelta(days=1), now=NOW)

    assert exc_info.value.message == "Start date cannot be in the past"
    assert _booking_count(db) == 0


@pytest.mark.parametrize(
    ("start", "end", "message"),
    [
        (None, NOW + timedelta(days=1), "Start date cannot be null"),
        (NOW + timedelta(days=1), None, "End date cannot be null"),
        (NOW + timedelta(days=2), NOW + timedelta(days=1), "Invalid booking dates: end must be after start"),
        (NOW + timedelta(days=1), NOW + timedelta(days=1), "Invalid booking dates: end must be after start"),
    ],
)
def test_invalid_dates_are_rejected(db, start, end, message):
    _, booker, item = _seed_owner_booker_item(db)

    with pytest.raises(ValidationError) as exc_info:
        create_booking(db, booker.id, item.id, start, end, now=NOW)

    assert exc_info.value.message == message


def test_naive_dates_are_treated_as_utc(db):
    _, booker, item = _seed_owner_booker_item(db)
    naive_start = (NOW + timedelta(days=1)).replace(tzinfo=None)

    booking = create_booking(db, booker.id, item.id, naive_start, naive_start + timedelta(hours=3), now=NOW)

    assert booking.start == NOW + timedelta(days=1)
    assert booking.start.tzinfo is not None


def test_owner_cannot_book_own_item(db):
    owner, _, item = _seed_owner_booker_item(db)

    with pytest.raises(AccessDeniedError) as exc_info:
        create_booking(db, owner.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    assert exc_info.value.message == "Owner cannot book own item"
    assert _booking_count(db) == 0


def test_unavailable_item_cannot_be_booked(db):
    _, booker, item = _seed_owner_booker_item(db, available=False)

    with pytest.raises(ValidationError) as exc_info:
        create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    assert exc_info.value.message == "Item is not available for booking"


def test_unknown_booker_or_item_is_not_found(db):
    _, booker, item = _seed_owner_booker_item(db)

    with pytest.raises(NotFoundError):
        create_booking(db, 999, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)
    with pytest.raises(NotFoundError):
        create_booking(db, booker.id, 999, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)


def test_get_booking_is_limited_to_booker_and_owner(db):
    owner, booker, item = _seed_owner_booker_item(db)
    stranger = User(name="Stranger", email="stranger@example.com")
    db.add(stranger)
    db.commit()
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    assert get_booking(db, created.id, booker.id) == get_booking(db, created.id, booker.id)
    assert get_booking(db, created.id, owner.id).id == created.id
    with pytest.raises(AccessDeniedError):
        get_booking(db, created.id, stranger.id)
    with pytest.raises(NotFoundError):
        get_booking(db, 999, owner.id)


def test_booker_list_filters_past_and_future(db):
    _, booker, item = _seed_owner_booker_item(db)
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    assert list_booker_bookings(db, booker.id, "PAST", now=NOW) == []
    future = list_booker_bookings(db, booker.id, "FUTURE", now=NOW)
    assert [booking.id for booking in future] == [created.id]


def test_state_filters_for_booker_and_owner(db):
    owner, booker, item = _seed_owner_booker_item(db)
    past = _add_booking(
        db,
        item,
        booker,
        NOW - timedelta(days=3),
        NOW - timedelta(days=2),
        status=BookingStatus.APPROVED,
    )
    current = _add_booking(
        db,
        item,
        booker,
        NOW - timedelta(hours=1),
        NOW + timedelta(hours=1),
        status=BookingStatus.APPROVED,
    )
    waiting = _add_booking(db, item, booker, NOW + timedelta(days=1), NOW + timedelta(days=2))
    rejected = _add_booking(
        db,
        item,
        booker,
        NOW + timedelta(days=3),
        NOW + timedelta(days=4),
        status=BookingStatus.REJECTED,
    )
    canceled = _add_booking(
        db,
        item,
        booker,
        NOW + timedelta(days=5),
        NOW + timedelta(days=6),
        status=BookingStatus.CANCELED,
    )

    expected = {
        "ALL": [canceled.id, rejected.id, waiting.id, current.id, past.id],
        "CURRENT": [current.id],
        "PAST": [past.id],
        "FUTURE": [canceled.id, rejected.id, waiting.id],
        "WAITING": [waiting.id],
        "REJECTED": [rejected.id],
    }
    for state, ids in expected.items():
        booker_view = list_booker_bookings(db, booker.id, state, now=NOW)
        owner_view = list_owner_bookings(db, owner.id, state, now=NOW)
        assert [booking.id for booking in booker_view] == ids, state
        assert [booking.id for booking in owner_view] == ids, state


def test_state_filter_is_case_insensitive(db):
    _, booker, item = _seed_owner_booker_item(db)
    created = create_booking(db, booker.id, item.id, NOW + timedelta(days=1), NOW + timedelta(days=2), now=NOW)

    result = list_booker_bookings(db, booker.id, "waiting", now=NOW)

    assert [booking.id for booking in result] == [created.id]


def test_unknown_state_is_rejected(db):
    owner, booker, _ = _seed_owner_booker_item(db)

    with pytest.raises(ValidationError) as exc_info:
        list_booker_bookings(db, booker.id, "CANCELED", now=NOW)
    assert exc_info.value.message == "Unknown state: CANCELED"

    with pytest.raises(ValidationError):
        list_owner_bookings(db, owner.id, "UNSUPPORTED_STATUS", now=NOW)


def test_lists_require_existing_user(db):
    with pytest.raises(NotFoundError):
        list_booker_bookings(db, 999, "ALL", now=NOW)
    with pytest.raises(NotFoundError):
        list_owner_bookings(db, 999, "ALL", now=NOW)


def test_list_pagination_uses_offset_and_limit(db):
    _, booker, item = _seed_owner_booker_item(db)
    first = _add_booking(db, item, booker, NOW + timedelta(days=1), NOW + timedelta(days=2))
    second = _add_booking(db, item, booker, NOW + timedelta(days=3), NOW + timedelta(days=4))
    _add_booking(db, item, booker, NOW + timedelta(days=5), NOW + timedelta(days=6))

    page = list_booker_bookings(db, booker.id, "ALL", offset=1, limit=2, now=NOW)

    assert [booking.id for booking in page] == [second.id, first.id]


def test_delete_by_booker_or_owner(db):
    owner, booker, item = _seed_owner_booker_item(db)
    by_booker_id = _add_booking(db, item, booker, NOW + timedelta(days=1), NOW + timedelta(days=2)).id
    by_owner_id = _add_booking(db, item, booker, NOW + timedelta(days=3), NOW + timedelta(days=4)).id
    owner_id, booker_id = owner.id, booker.id

    delete_booking(db, by_booker_id, booker_id)
    delete_booking(db, by_owner_id, owner_id)

    assert _booking_count(db) == 0
    with pytest.raises(NotFoundError):
        delete_booking(db, by_booker_id, booker_id)


def test_delete_by_stranger_is_denied(db):
    _, booker, item = _seed_owner_booker_item(db)
    stranger = User(name="Stranger", email="stranger@example.com")
    db.add(stranger)
    db.commit()
    booking = _add_booking(db, item, booker, NOW + timedelta(days=1), NOW + timedelta(days=2))

    with pytest.raises(AccessDeniedError):
        delete_booking(db, booking.id, stranger.id)

    assert _booking_count(db) == 1
