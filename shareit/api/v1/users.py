from fastapi import APIRouter, status
from fastapi.responses import Response

from shareit.api.deps import DbSession
from shareit.api.pagination import FromParam, SizeParam
from shareit.core.config import settings
from shareit.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from shareit.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreateRequest, db: DbSession) -> UserResponse:
    return user_service.create_user(db=db, payload=payload)


@router.get("", response_model=list[UserResponse], status_code=status.HTTP_200_OK)
def list_users(
    db: DbSession,
    offset: FromParam = 0,
    size: SizeParam = settings.max_page_size,
) -> list[UserResponse]:
    return user_service.list_users(db=db, offset=offset, limit=size)


@router.get("/{user_id}", response_model=UserResponse, status_code=status.HTTP_200_OK)
def get_user(user_id: int, db: DbSession) -> UserResponse:
    return user_service.get_user(db=db, user_id=user_id)


@router.patch("/{user_id}", response_model=UserResponse, status_code=status.HTTP_200_OK)
def update_user(user_id: int, payload: UserUpdateRequest, db: DbSession) -> UserResponse:
    return user_service.update_user(db=db, user_id=user_id, payload=payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: DbSession) -> Response:
    user_service.delete_user(db=db, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
