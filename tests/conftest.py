"""Test configuration: in-memory SQLite, fixed signing secret, no background reaper."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-docvault-suite-0123456789"
os.environ["REAPER_ENABLED"] = "false"
os.environ["HOSTNAME_LABEL"] = "test-host"
os.environ.pop("FIRST_ADMIN_PASSWORD", None)

from docvault.core.database import engine  # noqa: E402
from docvault.models import Base  # noqa: E402

Base.metadata.create_all(engine)
