"""Authentication service: login, logout, logout-all and operator revoke-all-for-user."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError

from docvault.core.context import CallerIdentity
from docvault.core.errors import (
    BadCredentialsError,
    ForbiddenError,
    IdNotFoundError,
    RepositoryError,
    UserDisabledError,
    UserLockedError,
)
from docvault.core.security import TokenCodec, extract_bearer, verify_password
from docvault.models.user import Role
from docvault.services.access import require_caller, require_role
from docvault.services.principals import PrincipalStore
from docvault.services.sessions import SessionRecord, SessionRegistry

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AuthService:
    """
    Orchestrates the principal store, password verifier, token codec and session registry.

    revocation_mode decides what revoke_all_for_user does with each record
    ("delete" removes it, "revoke" flips its revoked flag). With
    single_session=True, login revokes the principal's earlier sessions.
    """

    def __init__(
        self,
        principals: PrincipalStore,
        codec: TokenCodec,
        registry: SessionRegistry,
        *,
        clock: Callable[[], datetime] = _utcnow,
        revocation_mode: Literal["delete", "revoke"] = "delete",
        single_session: bool = False,
    ) -> None:
        self.principals = principals
        self.codec = codec
        self.registry = registry
        self.clock = clock
        self.revocation_mode = revocation_mode
        self.single_session = single_session

    def login(self, username: str, password: str) -> str:
        """Exchange credentials for a bearer token and record the session."""
        principal = self.principals.by_username(username)
        if principal is None:
            logger.info("Login rejected: unknown username")
            raise BadCredentialsError("Bad credentials")
        if not principal.active:
            logger.info("Login rejected: user_id=%s is disabled", principal.id)
            raise UserDisabledError("User is disabled")
        if principal.locked:
            logger.info("Login rejected: user_id=%s is locked", principal.id)
            raise UserLockedError("User account is locked")
        if not verify_password(password, principal.password_hash):
            logger.info("Login rejected: wrong password for user_id=%s", principal.id)
            raise BadCredentialsError("Bad credentials")

        if self.single_session:
            for record in self.registry.find_by_owner(principal.id):
                if not record.revoked:
                    self.registry.mark_revoked(record)

        now = self.clock()
        token = self.codec.mint(principal.username, now)
        self.registry.insert(principal.id, token, now)
        logger.info("Login succeeded: user_id=%s", principal.id)
        return token

    def _record_for_header(
        self, bearer_header: str | None, caller: CallerIdentity | None
    ) -> SessionRecord:
        require_caller(caller)
        token = extract_bearer(bearer_header)
        if token is None:
            raise ForbiddenError("Missing bearer token", detail_key="error_auditor_empty")
        # Decoding raises TokenProcessingError for malformed or expired tokens.
        self.codec.subject_of(token, self.clock())
        record = self.registry.find_by_token(token)
        if record is None:
            raise ForbiddenError("No session for this token", detail_key="error_auditor_empty")
        return record

    def logout(self, bearer_header: str | None, caller: CallerIdentity | None) -> None:
        """Revoke the session of the presented token."""
        record = self._record_for_header(bearer_header, caller)
        self.registry.mark_revoked(record)
        logger.info("Logout: session_id=%s owner_id=%s", record.id, record.owner_id)

    def logout_all(self, bearer_header: str | None, caller: CallerIdentity | None) -> int:
        """Revoke every session owned by the owner of the presented token; returns the count."""
        record = self._record_for_header(bearer_header, caller)
        sessions = self.registry.find_by_owner(record.owner_id)
        for session in sessions:
            self.registry.mark_revoked(session)
        logger.info(
            "Logout from all sessions: owner_id=%s sessions_revoked=%s",
            record.owner_id,
            len(sessions),
        )
        return len(sessions)

    def revoke_all_for_user(
        self,
        caller: CallerIdentity | None,
        target_user_id: int,
        *,
        missing_ok: bool = False,
    ) -> int:
        """
        Operator operation: remove every session of target_user_id.

        Raises IdNotFoundError when the user has no sessions (unless missing_ok)
        and RepositoryError when a record cannot be removed; records handled
        before the failure stay removed.
        """
        require_role(caller, Role.ADMIN, Role.SUPERVISOR)
        sessions = self.registry.find_by_owner(target_user_id)
        if not sessions:
            if missing_ok:
                return 0
            raise IdNotFoundError(
                f"No sessions for user {target_user_id}",
                detail_key="exception_id_not_found_token_user",
                detail_args=(target_user_id,),
            )
        for session in sessions:
            try:
                if self.revocation_mode == "revoke":
                    self.registry.mark_revoked(session)
                else:
                    self.registry.delete(session)
            except SQLAlchemyError as e:
                logger.error(
                    "Revoke-all failed: target_user_id=%s session_id=%s error=%s",
                    target_user_id,
                    session.id,
                    e,
                )
                raise RepositoryError(
                    str(e),
                    detail_key="exception_repository_save_error_token_revoke",
                ) from e
        logger.info(
            "Revoked all sessions: target_user_id=%s sessions=%s mode=%s by caller_id=%s",
            target_user_id,
            len(sessions),
            self.revocation_mode,
            caller.caller_id if caller else None,
        )
        return len(sessions)
