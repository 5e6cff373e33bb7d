"""User administration for managers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from docvault.api.deps import Caller, get_user_service, page_params
from docvault.schemas.common import Page
from docvault.schemas.users import UserBasic, UserDetail, UserRegistration, UserUpdate
from docvault.services.paging import PageRequest
from docvault.services.users import USER_SORT_FIELDS, UserService

router = APIRouter()

Users = Annotated[UserService, Depends(get_user_service)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=int)
def create_user(body: UserRegistration, caller: Caller, users: Users) -> int:
    """Create a USER account; returns the new id."""
    return users.create_user(caller, body)


@router.get("", response_model=Page[UserBasic])
def list_users(
    caller: Caller,
    users: Users,
    paging: Annotated[PageRequest, Depends(page_params(USER_SORT_FIELDS))],
) -> Page[UserBasic]:
    return users.list_users(caller, paging)


@router.get("/{user_id}", response_model=UserDetail)
def get_user(user_id: int, caller: Caller, users: Users) -> UserDetail:
    return users.get_user(caller, user_id)


@router.patch("/deactivate/{user_id}", status_code=status.HTTP_200_OK)
def deactivate_user(user_id: int, caller: Caller, users: Users) -> Response:
    users.deactivate_user(caller, user_id)
    return Response(status_code=status.HTTP_200_OK)


@router.patch("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_user(user_id: int, body: UserUpdate, caller: Caller, users: Users) -> Response:
    users.update_user(caller, user_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, caller: Caller, users: Users) -> Response:
    users.delete_user(caller, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}/sessions", status_code=status.HTTP_204_NO_CONTENT)
def revoke_user_sessions(user_id: int, caller: Caller, users: Users) -> Response:
    """Remove every session of the user; 404 when the user has none."""
    users.revoke_sessions(caller, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
