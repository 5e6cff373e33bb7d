"""Session reaper: expire aged session records, later delete aged expired ones."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from docvault.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)

EXPIRE_HORIZON = timedelta(hours=10)
DELETE_HORIZON = timedelta(hours=48)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def expire_sweep(
    registry: SessionRegistry,
    now: datetime | None = None,
    horizon: timedelta = EXPIRE_HORIZON,
) -> int:
    """
    Mark expired every record created before now - horizon.

    One transaction per record; a failing record is logged and skipped.
    Idempotent: safe to run repeatedly. Returns the number of records marked.
    """
    cutoff = (now or _utcnow()) - horizon
    marked = 0
    for record in registry.find_older_than(cutoff):
        if record.expired:
            continue
        try:
            registry.mark_expired(record)
            marked += 1
        except SQLAlchemyError as e:
            logger.warning("Expire sweep: session_id=%s not marked: %s", record.id, e)
    if marked > 0:
        logger.info("Expire sweep: cutoff=%s, sessions_expired=%s", cutoff.isoformat(), marked)
    return marked


def delete_sweep(
    registry: SessionRegistry,
    now: datetime | None = None,
    horizon: timedelta = DELETE_HORIZON,
) -> int:
    """
    Delete every already-expired record created before now - horizon.

    Records that are old but not yet expired are left for the expire sweep.
    Idempotent: safe to run repeatedly. Returns the number of records deleted.
    """
    cutoff = (now or _utcnow()) - horizon
    deleted = 0
    for record in registry.find_older_than(cutoff):
        if not record.expired:
            continue
        try:
            registry.delete(record)
            deleted += 1
        except SQLAlchemyError as e:
            logger.warning("Delete sweep: session_id=%s not deleted: %s", record.id, e)
    if deleted > 0:
        logger.info("Delete sweep: cutoff=%s, sessions_deleted=%s", cutoff.isoformat(), deleted)
    return deleted


class SessionReaper:
    """
    Background worker running the expire sweep every expire_interval and the
    delete sweep every delete_interval, inside the service process.

    Sweeps are blocking database work and run on a worker thread so the event
    loop keeps serving requests. There is no cancellation besides stop(); an
    interrupted sweep is simply resumed by the next tick.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        token_ttl: timedelta,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.registry = registry
        self.expire_interval = token_ttl / 2
        self.delete_interval = token_ttl
        self.clock = clock
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        """Start both sweep loops."""
        if self._tasks:
            logger.warning("Session reaper already running")
            return
        self._tasks = [
            asyncio.create_task(self._run_loop(self.run_expire, self.expire_interval)),
            asyncio.create_task(self._run_loop(self.run_delete, self.delete_interval)),
        ]
        logger.info(
            "Session reaper started: expire_interval=%s delete_interval=%s",
            self.expire_interval,
            self.delete_interval,
        )

    async def stop(self) -> None:
        """Cancel the sweep loops and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if tasks:
            logger.info("Session reaper stopped")

    def run_expire(self) -> int:
        return expire_sweep(self.registry, self.clock())

    def run_delete(self) -> int:
        return delete_sweep(self.registry, self.clock())

    async def _run_loop(self, sweep: Callable[[], int], interval: timedelta) -> None:
        seconds = interval.total_seconds()
        while True:
            try:
                await asyncio.to_thread(sweep)
            except Exception:
                logger.exception("Session reaper sweep %s failed", sweep.__name__)
            await asyncio.sleep(seconds)
