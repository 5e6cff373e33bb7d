"""Create the first ADMIN principal when the database has none."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from docvault.core.config import Settings
from docvault.core.security import hash_password
from docvault.models.user import Role, User
from docvault.services.auditing import stamp

logger = logging.getLogger(__name__)


def ensure_first_admin(session_factory: sessionmaker[Session], settings: Settings) -> int | None:
    """
    Insert FIRST_ADMIN_USERNAME with FIRST_ADMIN_PASSWORD as an ADMIN when no
    ADMIN exists yet. Returns the new id, or None when nothing was created
    (an admin exists or no password is configured).
    """
    with session_factory() as db:
        existing = db.execute(select(User.id).where(User.role == Role.ADMIN.value)).first()
        if existing is not None:
            return None
        if settings.FIRST_ADMIN_PASSWORD is None:
            logger.warning(
                "No ADMIN user exists and FIRST_ADMIN_PASSWORD is not set; "
                "create one with python -m docvault.scripts.create_user"
            )
            return None
        admin = User(
            username=settings.FIRST_ADMIN_USERNAME,
            password_hash=hash_password(settings.FIRST_ADMIN_PASSWORD.get_secret_value()),
            role=Role.ADMIN.value,
            names=settings.FIRST_ADMIN_USERNAME,
            id_card=f"bootstrap-{settings.FIRST_ADMIN_USERNAME}",
            active=True,
            locked=False,
        )
        stamp(admin)
        db.add(admin)
        db.commit()
        logger.info("Created first admin: id=%s username=%s", admin.id, admin.username)
        return admin.id
