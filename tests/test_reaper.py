"""Tests for the session reaper sweeps, the background worker and the CLI."""

import asyncio
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError

from docvault import reaper as reaper_cli
from docvault.api.middleware import RequestAuthenticator
from docvault.core.database import SessionLocal
from docvault.core.errors import TokenInvalidError
from docvault.models import Role
from docvault.services.principals import PrincipalStore
from docvault.services.reaper import SessionReaper, delete_sweep, expire_sweep
from docvault.services.sessions import SessionRecord, SessionRegistry
from tests.support import create_principal, make_codec, reset_database

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _record(record_id: int, age_hours: float, *, expired: bool = False) -> SessionRecord:
    return SessionRecord(record_id, 1, f"t{record_id}", False, expired, NOW - timedelta(hours=age_hours))


class TestExpireSweep(unittest.TestCase):
    """expire_sweep marks every not-yet-expired record older than the horizon."""

    def test_marks_only_unexpired_records(self) -> None:
        registry = MagicMock()
        registry.find_older_than.return_value = [_record(1, 11), _record(2, 12, expired=True)]
        self.assertEqual(expire_sweep(registry, NOW), 1)
        registry.find_older_than.assert_called_once_with(NOW - timedelta(hours=10))
        registry.mark_expired.assert_called_once()
        self.assertEqual(registry.mark_expired.call_args.args[0].id, 1)

    def test_failing_record_does_not_stop_sweep(self) -> None:
        registry = MagicMock()
        registry.find_older_than.return_value = [_record(1, 11), _record(2, 11)]
        registry.mark_expired.side_effect = [OperationalError("UPDATE", {}, Exception("x")), None]
        self.assertEqual(expire_sweep(registry, NOW), 1)
        self.assertEqual(registry.mark_expired.call_count, 2)


class TestDeleteSweep(unittest.TestCase):
    """delete_sweep removes only records that are already expired."""

    def test_deletes_only_expired_records(self) -> None:
        registry = MagicMock()
        registry.find_older_than.return_value = [_record(1, 49, expired=True), _record(2, 50)]
        self.assertEqual(delete_sweep(registry, NOW), 1)
        registry.find_older_than.assert_called_once_with(NOW - timedelta(hours=48))
        registry.delete.assert_called_once()
        self.assertEqual(registry.delete.call_args.args[0].id, 1)

    def test_no_old_records_returns_zero(self) -> None:
        registry = MagicMock()
        registry.find_older_than.return_value = []
        self.assertEqual(delete_sweep(registry, NOW), 0)
        registry.delete.assert_not_called()


class TestReaperAgainstDatabase(unittest.TestCase):
    """A session aged past the horizons is expired, rejected, then deleted."""

    def setUp(self) -> None:
        reset_database()
        self.registry = SessionRegistry(SessionLocal)

    def test_expire_then_delete(self) -> None:
        codec = make_codec()
        owner_id = create_principal("alice", "pass", Role.USER)
        real_now = datetime.now(UTC)
        token = codec.mint("alice", real_now)
        # Record created 11 hours ago, token itself still inside its own expiry.
        self.registry.insert(owner_id, token, real_now - timedelta(hours=11))

        self.assertEqual(expire_sweep(self.registry, real_now), 1)
        self.assertTrue(self.registry.find_by_token(token).expired)

        authenticator = RequestAuthenticator(codec, PrincipalStore(SessionLocal), self.registry)
        with self.assertRaises(TokenInvalidError):
            authenticator.authenticate(f"Bearer {token}")

        # Not yet past the delete horizon.
        self.assertEqual(delete_sweep(self.registry, real_now), 0)
        self.assertEqual(delete_sweep(self.registry, real_now + timedelta(hours=38)), 1)
        self.assertIsNone(self.registry.find_by_token(token))

    def test_sweeps_are_idempotent(self) -> None:
        self.registry.insert(1, "old", NOW - timedelta(hours=50))
        self.assertEqual(expire_sweep(self.registry, NOW), 1)
        self.assertEqual(expire_sweep(self.registry, NOW), 0)
        self.assertEqual(delete_sweep(self.registry, NOW), 1)
        self.assertEqual(delete_sweep(self.registry, NOW), 0)


class TestSessionReaperWorker(unittest.TestCase):
    def test_intervals_follow_token_ttl(self) -> None:
        worker = SessionReaper(MagicMock(), timedelta(hours=10))
        self.assertEqual(worker.expire_interval, timedelta(hours=5))
        self.assertEqual(worker.delete_interval, timedelta(hours=10))

    def test_start_runs_both_sweeps_and_stop_cancels(self) -> None:
        registry = MagicMock()
        registry.find_older_than.return_value = []
        worker = SessionReaper(registry, timedelta(hours=10), clock=lambda: NOW)

        async def scenario() -> None:
            await worker.start()
            self.assertTrue(worker.running)
            for _ in range(50):
                if registry.find_older_than.call_count >= 2:
                    break
                await asyncio.sleep(0.01)
            await worker.stop()

        asyncio.run(scenario())
        self.assertFalse(worker.running)
        cutoffs = {c.args[0] for c in registry.find_older_than.call_args_list}
        self.assertEqual(cutoffs, {NOW - timedelta(hours=10), NOW - timedelta(hours=48)})

    def test_unexpected_sweep_error_is_logged_and_loop_keeps_running(self) -> None:
        registry = MagicMock()
        registry.find_older_than.side_effect = RuntimeError("boom")
        worker = SessionReaper(registry, timedelta(seconds=0.02), clock=lambda: NOW)

        async def scenario() -> None:
            await worker.start()
            for _ in range(100):
                if registry.find_older_than.call_count >= 4:
                    break
                await asyncio.sleep(0.01)
            await worker.stop()

        with self.assertLogs("docvault.services.reaper", level="ERROR") as logs:
            asyncio.run(scenario())
        self.assertGreaterEqual(registry.find_older_than.call_count, 4)
        self.assertFalse(worker.running)
        self.assertIn("Session reaper sweep", logs.output[0])

class TestReaperCli(unittest.TestCase):
    def test_expire_only(self) -> None:
        with (
            patch.object(reaper_cli, "expire_sweep", return_value=3) as expire,
            patch.object(reaper_cli, "delete_sweep", return_value=0) as delete,
        ):
            self.assertEqual(reaper_cli.main(["expire"]), 0)
        expire.assert_called_once()
        delete.assert_not_called()

    def test_failure_returns_one(self) -> None:
        error = OperationalError("SELECT", {}, Exception("db down"))
        with patch.object(reaper_cli, "expire_sweep", side_effect=error):
            self.assertEqual(reaper_cli.main([]), 1)
