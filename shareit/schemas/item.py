from datetime import datetime
from typing import Annotated

from pydantic import Field

from shareit.schemas.base import CamelModel, NonBlankStr


class ItemCreateRequest(CamelModel):
    name: Annotated[NonBlankStr, Field(max_length=255)]
    description: Annotated[NonBlankStr, Field(max_length=1000)]
    available: bool
    request_id: int | None = None


class ItemUpdateRequest(CamelModel):
    name: Annotated[NonBlankStr, Field(max_length=255)] | None = None
    description: Annotated[NonBlankStr, Field(max_length=1000)] | None = None
    available: bool | None = None


class CommentCreateRequest(CamelModel):
    text: Annotated[NonBlankStr, Field(max_length=2000)]


class CommentResponse(CamelModel):
    id: int
    text: str
    author_name: str
    created: datetime


class BookingShortResponse(CamelModel):
    id: int
    booker_id: int
    start: datetime
    end: datetime


class ItemResponse(CamelModel):
    id: int
    name: str
    description: str
    available: bool
    request_id: int | None = None


class ItemDetailResponse(ItemResponse):
    last_booking: BookingShortResponse | None = None
    next_booking: BookingShortResponse | None = None
    comments: list[CommentResponse] = []
