"""Core app configuration, database and security primitives."""

from docvault.core.config import get_settings, settings
from docvault.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
