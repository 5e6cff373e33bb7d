"""Problem-detail error responses: one mapping from exceptions to the wire format."""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from docvault.core.config import get_settings
from docvault.core.errors import (
    AppError,
    BadCredentialsError,
    DataIntegrityError,
    InvalidFieldValueError,
    RepositoryError,
    UserDisabledError,
    UserLockedError,
)
from docvault.core.i18n import get_message, resolve_locale

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"


def request_locale(request: Request) -> str:
    """Locale of the request: explicit request.state.locale, else Accept-Language, else English."""
    locale = getattr(request.state, "locale", None)
    if locale:
        return locale
    return resolve_locale(request.headers.get("accept-language"))


def problem_body(
    request: Request,
    status_code: int,
    title: str,
    detail: str | None,
    exception: str | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": title,
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
        "hostname": get_settings().HOSTNAME_LABEL,
    }
    if exception:
        body["exception"] = exception
    return body


def _problem(request: Request, status_code: int, body: dict[str, Any], headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body,
        media_type=PROBLEM_CONTENT_TYPE,
        headers=headers,
    )


def problem_response(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as a localized problem detail."""
    if get_settings().AUTH_COLLAPSE_ACCOUNT_STATE_ERRORS and isinstance(
        exc, (UserDisabledError, UserLockedError)
    ):
        exc = BadCredentialsError("Bad credentials")

    locale = request_locale(request)
    title = get_message(exc.title_key, locale)
    detail = get_message(exc.detail_key, locale, exc.detail_args) if exc.detail_key else None

    log_fn = logger.error if exc.status_code >= 500 else logger.info
    log_fn(
        "%s %s -> %s %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        type(exc).__name__,
        exc.message,
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    body = problem_body(request, exc.status_code, title, detail, exc.message or None)
    return _problem(request, exc.status_code, body, headers)


def _validation_summary(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{loc}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that turn every error into a problem detail."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return problem_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return problem_response(request, InvalidFieldValueError(_validation_summary(exc)))

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        return problem_response(request, DataIntegrityError(str(exc.orig)))

    @app.exception_handler(SQLAlchemyError)
    async def handle_repository_error(request: Request, exc: SQLAlchemyError):
        return problem_response(request, RepositoryError(type(exc).__name__))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        try:
            title = HTTPStatus(exc.status_code).phrase
        except ValueError:
            title = "Error"
        detail = exc.detail if isinstance(exc.detail, str) else title
        body = problem_body(request, exc.status_code, title, detail)
        return _problem(request, exc.status_code, body, getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        locale = request_locale(request)
        body = problem_body(
            request,
            500,
            get_message("exception_server_error", locale),
            get_message("exception_server_error_detail", locale),
        )
        return _problem(request, 500, body)
