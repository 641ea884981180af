from typing import Annotated

from pydantic import EmailStr, Field

from shareit.schemas.base import CamelModel, NonBlankStr


class UserCreateRequest(CamelModel):
    name: Annotated[NonBlankStr, Field(max_length=255)]
    email: EmailStr


class UserUpdateRequest(CamelModel):
    name: Annotated[NonBlankStr, Field(max_length=255)] | None = None
    email: EmailStr | None = None


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
