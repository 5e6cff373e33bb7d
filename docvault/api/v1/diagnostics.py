"""Role-labelled endpoints for checking a token by hand."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from docvault.api.deps import Caller
from docvault.core.errors import AuthenticationRequiredError
from docvault.models.user import Role
from docvault.services.access import require_role

router = APIRouter(default_response_class=PlainTextResponse)


def _require_login(caller: Caller) -> None:
    if caller is None:
        raise AuthenticationRequiredError("Authentication required")


@router.get("/public-endpoint")
def public_endpoint() -> str:
    return "Hello! I'm a public endpoint. You may or may not be logged in."


@router.get("/secured-endpoint")
def secured_endpoint(caller: Caller) -> str:
    _require_login(caller)
    return "Hello! I'm just a secured endpoint, and you are logged in."


@router.get("/supervisor-endpoint")
def supervisor_endpoint(caller: Caller) -> str:
    _require_login(caller)
    require_role(caller, Role.SUPERVISOR)
    return "Hello! I'm a secured endpoint, and you are SUPERVISOR."


@router.get("/admin-endpoint")
def admin_endpoint(caller: Caller) -> str:
    _require_login(caller)
    require_role(caller, Role.ADMIN)
    return "Hello! I'm a secured endpoint, and you are ADMIN."
