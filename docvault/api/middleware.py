"""Request authenticator: bearer extraction, token and session checks, route policy."""

import logging
from collections.abc import Callable

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from docvault.api.errors import problem_response
from docvault.api.policy import RoutePolicy
from docvault.core.context import CallerIdentity, reset_current_caller, set_current_caller
from docvault.core.errors import AppError, RepositoryError, TokenInvalidError
from docvault.core.security import TokenCodec, extract_bearer
from docvault.services.principals import PrincipalStore
from docvault.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)

# Diagnostic route that reports an invalid session itself.
INVALID_TOKEN_ROUTE_SUFFIX = "/auth/invalid-jwt"


class RequestAuthenticator:
    """
    Resolves the caller of one request from its Authorization header.

    Outcomes:
      - None (anonymous): no bearer, unknown user, token not valid for the user,
        or no session record for the token;
      - CallerIdentity: valid token backed by a live session record;
      - TokenProcessingError: the token cannot be decoded (malformed, bad
        signature, expired);
      - TokenInvalidError: the session record is revoked or expired.
    """

    def __init__(
        self,
        codec: TokenCodec,
        principals: PrincipalStore,
        registry: SessionRegistry,
    ) -> None:
        self.codec = codec
        self.principals = principals
        self.registry = registry

    def authenticate(self, authorization: str | None, path: str = "") -> CallerIdentity | None:
        token = extract_bearer(authorization)
        if token is None:
            return None
        username = self.codec.subject_of(token)
        principal = self.principals.by_username(username)
        if principal is None:
            return None
        if not self.codec.is_structurally_valid(token, principal.username):
            return None
        record = self.registry.find_by_token(token)
        if record is None:
            return None
        if record.revoked or record.expired:
            if path.endswith(INVALID_TOKEN_ROUTE_SUFFIX):
                return None
            raise TokenInvalidError(
                "Session is revoked" if record.revoked else "Session has expired"
            )
        return CallerIdentity(
            caller_id=principal.id,
            username=principal.username,
            role=principal.role,
        )


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Authenticates every request, applies the route policy and exposes the
    caller as request.state.caller and through the caller context variable
    for the duration of the request. Failures are answered here as problem
    details; handlers never run.
    """

    def __init__(
        self,
        app: ASGIApp,
        authenticator: Callable[[], RequestAuthenticator],
        policy: RoutePolicy,
    ) -> None:
        super().__init__(app)
        self.authenticator = authenticator
        self.policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            return await call_next(request)
        path = request.url.path
        try:
            caller = await run_in_threadpool(
                self.authenticator().authenticate,
                request.headers.get("authorization"),
                path,
            )
            self.policy.check(path, caller)
        except AppError as exc:
            return problem_response(request, exc)
        except SQLAlchemyError as exc:
            return problem_response(request, RepositoryError(type(exc).__name__))

        logger.debug(
            "%s %s caller_id=%s",
            request.method,
            path,
            caller.caller_id if caller else None,
        )
        request.state.caller = caller
        token = set_current_caller(caller)
        try:
            return await call_next(request)
        finally:
            reset_current_caller(token)
