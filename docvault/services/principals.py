"""Read-only principal lookup used by authentication (case-insensitive usernames)."""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from docvault.models.user import Role, User


@dataclass(frozen=True)
class Principal:
    """Authenticatable actor as seen by the auth subsystem (a copy, not an ORM row)."""

    id: int
    username: str
    password_hash: str
    role: Role
    active: bool
    locked: bool


def to_principal(user: User) -> Principal:
    return Principal(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        role=Role(user.role),
        active=bool(user.active),
        locked=bool(user.locked),
    )


class PrincipalStore:
    """Looks up principals by username, ignoring case. Each lookup uses its own short session."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def by_username(self, username: str) -> Principal | None:
        if not username:
            return None
        with self._session_factory() as db:
            user = db.execute(
                select(User).where(func.lower(User.username) == username.lower())
            ).scalar_one_or_none()
            return to_principal(user) if user is not None else None
