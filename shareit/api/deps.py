from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from shareit.core.config import settings
from shareit.db.session import get_db


def get_current_user_id(
    user_id: Annotated[int, Header(alias=settings.user_id_header, gt=0)],
) -> int:
    return user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
DbSession = Annotated[Session, Depends(get_db)]
