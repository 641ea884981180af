from datetime import datetime

from shareit.schemas.base import CamelModel


class BookingCreateRequest(CamelModel):
    item_id: int
    # presence and ordering of the dates is checked by the booking workflow
    start: datetime | None = None
    end: datetime | None = None


class BookerSummary(CamelModel):
    id: int
    name: str
    email: str


class BookedItemSummary(CamelModel):
    id: int
    name: str
    description: str
    available: bool
    request_id: int | None = None


class BookingResponse(CamelModel):
    id: int
    start: datetime
    end: datetime
    item_id: int
    booker_id: int
    status: str
    booker: BookerSummary
    item: BookedItemSummary
