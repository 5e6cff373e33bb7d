"""The authenticated caller's own account."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from docvault.api.deps import Caller, get_user_service
from docvault.schemas.users import UserDetail, UserUpdate
from docvault.services.users import UserService

router = APIRouter()


@router.get("/profile", response_model=UserDetail)
def get_profile(
    caller: Caller, users: Annotated[UserService, Depends(get_user_service)]
) -> UserDetail:
    return users.get_profile(caller)


@router.patch("", status_code=status.HTTP_204_NO_CONTENT)
def update_profile(
    body: UserUpdate,
    caller: Caller,
    users: Annotated[UserService, Depends(get_user_service)],
) -> Response:
    """Update own account; only USER principals (managers use management routes)."""
    users.update_own_profile(caller, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
