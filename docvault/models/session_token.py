"""ORM model for server-side session records (one row per issued bearer token)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Text

from docvault.models.base import Base


class SessionToken(Base):
    """
    Issued bearer token and its lifecycle flags.

    owner_id references users.id by value only (no relationship). revoked and
    expired only ever go from False to True.
    """

    __tablename__ = "session_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False, index=True)
    token = Column(Text, nullable=False, unique=True)
    revoked = Column(Boolean, nullable=False, default=False)
    expired = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
