"""Request-scoped caller identity, established by the request authenticator."""

from contextvars import ContextVar, Token
from dataclasses import dataclass

from docvault.models.user import Role


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated principal for the duration of one request."""

    caller_id: int
    username: str
    role: Role


_current_caller: ContextVar[CallerIdentity | None] = ContextVar("current_caller", default=None)


def get_current_caller() -> CallerIdentity | None:
    return _current_caller.get()


def set_current_caller(caller: CallerIdentity | None) -> Token:
    """Set the caller for the current context; pass the returned token to reset_current_caller."""
    return _current_caller.set(caller)


def reset_current_caller(token: Token) -> None:
    _current_caller.reset(token)
