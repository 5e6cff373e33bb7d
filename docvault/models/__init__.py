"""SQLAlchemy ORM models."""

from docvault.models.base import Base
from docvault.models.document import Document
from docvault.models.session_token import SessionToken
from docvault.models.user import MANAGER_ROLES, Role, User

__all__ = ["Base", "Document", "MANAGER_ROLES", "Role", "SessionToken", "User"]
