"""Manager (ADMIN and SUPERVISOR) administration."""

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
def create_manager(body: UserRegistration, caller: Caller, users: Users) -> int:
    """Create a manager (ADMIN only); returns the new id."""
    return users.create_manager(caller, body)


@router.get("", response_model=Page[UserBasic])
def list_managers(
    caller: Caller,
    users: Users,
    paging: Annotated[PageRequest, Depends(page_params(USER_SORT_FIELDS))],
) -> Page[UserBasic]:
    return users.list_managers(caller, paging)


@router.get("/{manager_id}", response_model=UserDetail)
def get_manager(manager_id: int, caller: Caller, users: Users) -> UserDetail:
    return users.get_manager(caller, manager_id)


@router.patch("/deactivate/{manager_id}", status_code=status.HTTP_200_OK)
def deactivate_manager(manager_id: int, caller: Caller, users: Users) -> Response:
    """Disable the manager and remove all of their sessions (ADMIN only)."""
    users.deactivate_manager(caller, manager_id)
    return Response(status_code=status.HTTP_200_OK)


@router.patch("/{manager_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_manager(manager_id: int, body: UserUpdate, caller: Caller, users: Users) -> Response:
    users.update_manager(caller, manager_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{manager_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_manager(manager_id: int, caller: Caller, users: Users) -> Response:
    users.delete_manager(caller, manager_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
