"""Session registry: server-side record of every issued bearer token."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, sessionmaker

from docvault.models.session_token import SessionToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    """Snapshot of a session_tokens row."""

    id: int
    owner_id: int
    token: str
    revoked: bool
    expired: bool
    created_at: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_record(row: SessionToken) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        owner_id=row.owner_id,
        token=row.token,
        revoked=bool(row.revoked),
        expired=bool(row.expired),
        created_at=_as_utc(row.created_at),
    )


class SessionRegistry:
    """
    Transactional store of session records.

    Every operation opens, commits and closes its own session, so callers that
    iterate over records get one short transaction per record. State
    transitions are single-column UPDATEs that only ever set a flag to True,
    which keeps them idempotent and lets concurrent revocations converge.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def insert(self, owner_id: int, token: str, now: datetime) -> SessionRecord:
        with self._session_factory.begin() as db:
            row = SessionToken(
                owner_id=owner_id,
                token=token,
                revoked=False,
                expired=False,
                created_at=now,
            )
            db.add(row)
            db.flush()
            record = _to_record(row)
        logger.debug("Session recorded: id=%s owner_id=%s", record.id, owner_id)
        return record

    def find_by_token(self, token: str) -> SessionRecord | None:
        with self._session_factory() as db:
            row = db.execute(
                select(SessionToken).where(SessionToken.token == token)
            ).scalar_one_or_none()
            return _to_record(row) if row is not None else None

    def find_by_owner(self, owner_id: int) -> list[SessionRecord]:
        with self._session_factory() as db:
            rows = db.execute(
                select(SessionToken)
                .where(SessionToken.owner_id == owner_id)
                .order_by(SessionToken.id)
            ).scalars()
            return [_to_record(r) for r in rows]

    def find_older_than(self, instant: datetime) -> list[SessionRecord]:
        """Records whose created_at is strictly before instant."""
        with self._session_factory() as db:
            rows = db.execute(
                select(SessionToken)
                .where(SessionToken.created_at < instant)
                .order_by(SessionToken.id)
            ).scalars()
            return [_to_record(r) for r in rows]

    def mark_revoked(self, record: SessionRecord) -> None:
        with self._session_factory.begin() as db:
            db.execute(
                update(SessionToken)
                .where(SessionToken.id == record.id)
                .values(revoked=True)
            )

    def mark_expired(self, record: SessionRecord) -> None:
        with self._session_factory.begin() as db:
            db.execute(
                update(SessionToken)
                .where(SessionToken.id == record.id)
                .values(expired=True)
            )

    def delete(self, record: SessionRecord) -> None:
        with self._session_factory.begin() as db:
            db.execute(delete(SessionToken).where(SessionToken.id == record.id))
