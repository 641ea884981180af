from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from shareit.core.exceptions import ValidationError
from shareit.db.base import Base


class BookingStatus(str, Enum):
    WAITING = "WAITING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


# bookings in these statuses no longer hold the item
RELEASED_STATUSES = (BookingStatus.REJECTED.value, BookingStatus.CANCELED.value)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_bookings_start_before_end"),
        CheckConstraint(
            "status IN ('WAITING', 'APPROVED', 'REJECTED', 'CANCELED')",
            name="ck_bookings_status",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    start: Mapped[datetime] = mapped_column("start_date", DateTime(timezone=True), nullable=False, index=True)
    end: Mapped[datetime] = mapped_column("end_date", DateTime(timezone=True), nullable=False)
    item_id: Mapped[int] = mapped_column(ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    booker_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=BookingStatus.WAITING.value)

    @property
    def is_waiting(self) -> bool:
        return self.status == BookingStatus.WAITING.value

    def decide(self, approved: bool) -> None:
        self.status = BookingStatus.APPROVED.value if approved else BookingStatus.REJECTED.value


class BookingState(str, Enum):
    """Listing filters accepted by the booker and owner booking lists."""

    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, value: str) -> "BookingState":
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown state: {value}") from None
