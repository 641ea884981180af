from datetime import datetime
from typing import Annotated

from pydantic import Field

from shareit.schemas.base import CamelModel, NonBlankStr


class ItemRequestCreateRequest(CamelModel):
    description: Annotated[NonBlankStr, Field(max_length=1000)]


class ItemAnswerResponse(CamelModel):
    id: int
    name: str
    description: str
    available: bool
    request_id: int | None
    owner_id: int


class ItemRequestResponse(CamelModel):
    id: int
    description: str
    requestor_id: int
    created: datetime
    items: list[ItemAnswerResponse] = []
