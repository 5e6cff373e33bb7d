"""Login, logout and session diagnostics."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response, status

from docvault.api.deps import Caller, get_auth_service
from docvault.core.errors import TokenInvalidError
from docvault.schemas.auth import LoginRequest, TokenResponse
from docvault.services.auth import AuthService

router = APIRouter()


@router.post("/authenticate", response_model=TokenResponse)
def authenticate(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Exchange username and password for a bearer token.
    Send it on later requests as: Authorization: Bearer <jwt>
    """
    return TokenResponse(jwt=auth.login(body.username, body.password))


@router.get("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    caller: Caller,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> Response:
    """Revoke the session of the token used on this request."""
    auth.logout(authorization, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/logout-all", status_code=status.HTTP_204_NO_CONTENT)
def logout_all(
    caller: Caller,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> Response:
    """Revoke every session of the token's owner, including this one."""
    auth.logout_all(authorization, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/invalid-jwt", status_code=status.HTTP_403_FORBIDDEN)
def invalid_jwt() -> None:
    """Always answers with the invalid-session problem detail."""
    raise TokenInvalidError("Session is revoked or expired")
