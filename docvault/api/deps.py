"""Shared FastAPI dependencies: auth components, services and the request caller."""

from collections.abc import Callable
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from docvault.core.config import get_settings
from docvault.core.context import CallerIdentity
from docvault.core.database import SessionLocal, get_db
from docvault.core.security import TokenCodec
from docvault.services.auth import AuthService
from docvault.services.documents import DocumentService
from docvault.services.paging import DEFAULT_PAGE_SIZE, DEFAULT_SORT, PageRequest, page_request
from docvault.services.principals import PrincipalStore
from docvault.services.sessions import SessionRegistry
from docvault.services.users import UserService


@lru_cache
def get_token_codec() -> TokenCodec:
    settings = get_settings()
    return TokenCodec(
        settings.JWT_SECRET.get_secret_value(),
        ttl=timedelta(hours=settings.TOKEN_TTL_HOURS),
        algorithm=settings.JWT_ALGORITHM,
    )


@lru_cache
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(SessionLocal)


@lru_cache
def get_principal_store() -> PrincipalStore:
    return PrincipalStore(SessionLocal)


@lru_cache
def get_auth_service() -> AuthService:
    settings = get_settings()
    return AuthService(
        get_principal_store(),
        get_token_codec(),
        get_session_registry(),
        revocation_mode=settings.SESSION_REVOCATION_MODE,
        single_session=settings.AUTH_SINGLE_SESSION,
    )


def get_caller(request: Request) -> CallerIdentity | None:
    """Caller established by the authentication middleware (None when anonymous)."""
    return getattr(request.state, "caller", None)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UserService:
    return UserService(db, auth)


def get_document_service(db: Annotated[Session, Depends(get_db)]) -> DocumentService:
    return DocumentService(db)


Caller = Annotated[CallerIdentity | None, Depends(get_caller)]


def page_params(allowed_fields: set[str]) -> Callable[..., PageRequest]:
    """Dependency factory for the page/size/sort query parameters of a listing."""

    def dependency(
        page: Annotated[int, Query(ge=0)] = 0,
        size: Annotated[int, Query(ge=1)] = DEFAULT_PAGE_SIZE,
        sort: Annotated[list[str] | None, Query()] = None,
    ) -> PageRequest:
        return page_request(page, size, sort or DEFAULT_SORT, allowed_fields)

    return dependency
