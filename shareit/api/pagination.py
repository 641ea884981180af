from typing import Annotated

from fastapi import Query

from shareit.core.config import settings

FromParam = Annotated[int, Query(alias="from", ge=0)]
SizeParam = Annotated[int, Query(ge=1, le=settings.max_page_size)]
DEFAULT_SIZE = settings.default_page_size
