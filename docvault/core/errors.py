"""Application error taxonomy.

Every failure is raised where it happens and rendered once, at the API
boundary, as a localized problem detail. Each class carries its HTTP status
and the message-catalog keys for the title and detail. The exception message
(``str(exc)``) is a short non-localized description that ends up in the
``exception`` field of the problem detail.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors mapped to problem-detail responses."""

    status_code: int = 500
    title_key: str = "exception_server_error"
    detail_key: str | None = "exception_server_error_detail"

    def __init__(
        self,
        message: str = "",
        *,
        detail_args: tuple[Any, ...] = (),
        detail_key: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail_args = detail_args
        if detail_key is not None:
            self.detail_key = detail_key


# 401


class BadCredentialsError(AppError):
    status_code = 401
    title_key = "exception_auth_wrong_credentials"
    detail_key = "exception_auth_wrong_credentials_detail"


class UserDisabledError(AppError):
    status_code = 401
    title_key = "exception_auth_user_disabled"
    detail_key = "exception_auth_user_disabled_detail"


class UserLockedError(AppError):
    status_code = 401
    title_key = "exception_auth_user_locked"
    detail_key = "exception_auth_user_locked_detail"


class UnknownAuthError(AppError):
    status_code = 401
    title_key = "exception_auth_unknown_error"
    detail_key = "exception_auth_unknown_error_detail"


class AuthenticationRequiredError(UnknownAuthError):
    """Anonymous request on a route that needs an authenticated caller."""

    title_key = "exception_auth_required"
    detail_key = "exception_auth_required_detail"


# 403


class TokenInvalidError(AppError):
    """The session behind the bearer token was revoked or has expired."""

    status_code = 403
    title_key = "exception_jwt_revoked"
    detail_key = "exception_jwt_revoked_detail"


class ForbiddenError(AppError):
    status_code = 403
    title_key = "exception_auth_permission_error"
    detail_key = "exception_auth_permission_error_detail"


class NotOwnerError(AppError):
    status_code = 403
    title_key = "exception_not_the_owner"
    detail_key = "exception_not_the_owner_detail"


class ForbiddenActionError(AppError):
    status_code = 403
    title_key = "exception_forbidden_action"
    detail_key = "exception_forbidden_action_detail"


# 404


class IdNotFoundError(AppError):
    status_code = 404
    title_key = "exception_id_not_found"
    detail_key = "exception_id_not_found_detail"


class UsernameNotFoundError(AppError):
    status_code = 404
    title_key = "exception_username_not_found"
    detail_key = "exception_username_not_found_detail"


# 400


class InvalidFieldValueError(AppError):
    status_code = 400
    title_key = "error_invalid_body_field"
    detail_key = "error_invalid_body_field_detail"


class DataIntegrityError(AppError):
    status_code = 400
    title_key = "exception_data_integrity"
    detail_key = "exception_data_integrity_detail"


# 500


class RepositoryError(AppError):
    status_code = 500
    title_key = "exception_server_error"
    detail_key = "exception_repository_error_detail"


class TokenProcessingError(AppError):
    """Malformed, badly signed or expired bearer token."""

    status_code = 500
    title_key = "exception_jwt_processing"
    detail_key = "exception_jwt_processing_detail"
