"""Tests for AuthService: login, logout, logout-all and revoke-all-for-user."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from docvault.core.database import SessionLocal
from docvault.core.errors import (
    BadCredentialsError,
    ForbiddenError,
    IdNotFoundError,
    RepositoryError,
    TokenProcessingError,
    UserDisabledError,
    UserLockedError,
)
from docvault.models import Role
from docvault.services.auth import AuthService
from docvault.services.principals import PrincipalStore
from docvault.services.sessions import SessionRecord, SessionRegistry
from tests.support import caller_for, create_principal, make_codec, reset_database

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


class AuthServiceTestCase(unittest.TestCase):
    revocation_mode = "delete"
    single_session = False

    def setUp(self) -> None:
        reset_database()
        self.registry = SessionRegistry(SessionLocal)
        self.codec = make_codec()
        self.auth = AuthService(
            PrincipalStore(SessionLocal),
            self.codec,
            self.registry,
            clock=lambda: NOW,
            revocation_mode=self.revocation_mode,
            single_session=self.single_session,
        )
        self.admin_id = create_principal("admin", "pass", Role.ADMIN)
        self.admin = caller_for(self.admin_id, "admin", Role.ADMIN)


class TestLogin(AuthServiceTestCase):
    def test_login_records_session(self) -> None:
        token = self.auth.login("admin", "pass")
        record = self.registry.find_by_token(token)
        self.assertIsNotNone(record)
        self.assertEqual(record.owner_id, self.admin_id)
        self.assertFalse(record.revoked)
        self.assertEqual(self.codec.subject_of(token, NOW), "admin")

    def test_login_ignores_username_case_and_uses_stored_name(self) -> None:
        token = self.auth.login("ADMIN", "pass")
        self.assertEqual(self.codec.subject_of(token, NOW), "admin")

    def test_wrong_password_is_bad_credentials(self) -> None:
        with self.assertRaises(BadCredentialsError):
            self.auth.login("admin", "wrong")
        self.assertEqual(self.registry.find_by_owner(self.admin_id), [])

    def test_unknown_user_is_bad_credentials(self) -> None:
        with self.assertRaises(BadCredentialsError):
            self.auth.login("nobody", "pass")

    def test_disabled_user_rejected(self) -> None:
        create_principal("sleepy", "pass", Role.USER, active=False)
        with self.assertRaises(UserDisabledError):
            self.auth.login("sleepy", "pass")

    def test_locked_user_rejected(self) -> None:
        create_principal("jailed", "pass", Role.USER, locked=True)
        with self.assertRaises(UserLockedError):
            self.auth.login("jailed", "pass")

    def test_multiple_sessions_allowed_by_default(self) -> None:
        self.auth.login("admin", "pass")
        self.auth.login("admin", "pass")
        records = self.registry.find_by_owner(self.admin_id)
        self.assertEqual(len(records), 2)
        self.assertFalse(any(r.revoked for r in records))


class TestSingleSessionLogin(AuthServiceTestCase):
    single_session = True

    def test_login_revokes_earlier_sessions(self) -> None:
        first = self.auth.login("admin", "pass")
        second = self.auth.login("admin", "pass")
        self.assertTrue(self.registry.find_by_token(first).revoked)
        self.assertFalse(self.registry.find_by_token(second).revoked)


class TestLogout(AuthServiceTestCase):
    def test_logout_revokes_only_presented_session(self) -> None:
        first = self.auth.login("admin", "pass")
        second = self.auth.login("admin", "pass")
        self.auth.logout(f"Bearer {first}", self.admin)
        self.assertTrue(self.registry.find_by_token(first).revoked)
        self.assertFalse(self.registry.find_by_token(second).revoked)

    def test_logout_twice_is_idempotent(self) -> None:
        token = self.auth.login("admin", "pass")
        self.auth.logout(f"Bearer {token}", self.admin)
        self.auth.logout(f"Bearer {token}", self.admin)
        self.assertTrue(self.registry.find_by_token(token).revoked)

    def test_logout_without_caller_is_forbidden(self) -> None:
        token = self.auth.login("admin", "pass")
        with self.assertRaises(ForbiddenError):
            self.auth.logout(f"Bearer {token}", None)

    def test_logout_without_bearer_is_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            self.auth.logout(None, self.admin)

    def test_logout_with_unrecorded_token_is_forbidden(self) -> None:
        token = self.codec.mint("admin", NOW)
        with self.assertRaises(ForbiddenError):
            self.auth.logout(f"Bearer {token}", self.admin)

    def test_logout_with_garbage_token_fails_processing(self) -> None:
        with self.assertRaises(TokenProcessingError):
            self.auth.logout("Bearer garbage", self.admin)

    def test_logout_all_revokes_every_owner_session(self) -> None:
        first = self.auth.login("admin", "pass")
        second = self.auth.login("admin", "pass")
        other_id = create_principal("other", "pass", Role.USER)
        other = self.auth.login("other", "pass")

        count = self.auth.logout_all(f"Bearer {first}", self.admin)

        self.assertEqual(count, 2)
        self.assertTrue(self.registry.find_by_token(first).revoked)
        self.assertTrue(self.registry.find_by_token(second).revoked)
        self.assertFalse(self.registry.find_by_token(other).revoked)
        self.assertEqual(len(self.registry.find_by_owner(other_id)), 1)


class TestRevokeAllForUser(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = create_principal("carol", "pass", Role.USER)

    def test_deletes_every_session_of_target(self) -> None:
        self.auth.login("carol", "pass")
        self.auth.login("carol", "pass")
        removed = self.auth.revoke_all_for_user(self.admin, self.user_id)
        self.assertEqual(removed, 2)
        self.assertEqual(self.registry.find_by_owner(self.user_id), [])

    def test_no_sessions_is_not_found(self) -> None:
        with self.assertRaises(IdNotFoundError) as ctx:
            self.auth.revoke_all_for_user(self.admin, self.user_id)
        self.assertEqual(ctx.exception.detail_key, "exception_id_not_found_token_user")

    def test_no_sessions_with_missing_ok_returns_zero(self) -> None:
        self.assertEqual(self.auth.revoke_all_for_user(self.admin, self.user_id, missing_ok=True), 0)

    def test_user_role_is_forbidden(self) -> None:
        self.auth.login("carol", "pass")
        carol = caller_for(self.user_id, "carol", Role.USER)
        with self.assertRaises(ForbiddenError):
            self.auth.revoke_all_for_user(carol, self.user_id)

    def test_storage_failure_is_repository_error(self) -> None:
        registry = MagicMock()
        registry.find_by_owner.return_value = [
            SessionRecord(1, self.user_id, "t1", False, False, NOW - timedelta(hours=1)),
        ]
        registry.delete.side_effect = OperationalError("DELETE", {}, Exception("db down"))
        auth = AuthService(MagicMock(), self.codec, registry, clock=lambda: NOW)
        with self.assertRaises(RepositoryError) as ctx:
            auth.revoke_all_for_user(self.admin, self.user_id)
        self.assertEqual(ctx.exception.detail_key, "exception_repository_save_error_token_revoke")


class TestRevokeAllForUserRevokeMode(AuthServiceTestCase):
    revocation_mode = "revoke"

    def test_marks_records_revoked_instead_of_deleting(self) -> None:
        user_id = create_principal("dave", "pass", Role.USER)
        token = self.auth.login("dave", "pass")
        self.assertEqual(self.auth.revoke_all_for_user(self.admin, user_id), 1)
        self.assertTrue(self.registry.find_by_token(token).revoked)
