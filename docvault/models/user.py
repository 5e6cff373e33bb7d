"""ORM model for principals (users and managers) and their roles."""

from enum import Enum

from sqlalchemy import Boolean, Column, Index, Integer, String, func

from docvault.models.base import AuditMixin, Base


class Role(str, Enum):
    """Access role. ADMIN and SUPERVISOR principals are 'managers'."""

    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    USER = "USER"


MANAGER_ROLES = frozenset({Role.ADMIN, Role.SUPERVISOR})


class User(AuditMixin, Base):
    """
    Principal account for bearer-token authentication and role-based access control.

    Usernames are unique after case folding (functional unique index on lower(username)).
    active=False or locked=True disables login.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)
    names = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    id_card = Column(String(64), nullable=False, unique=True)
    active = Column(Boolean, nullable=False, default=True)
    locked = Column(Boolean, nullable=False, default=False)


Index("ix_users_username_lower", func.lower(User.username), unique=True)
