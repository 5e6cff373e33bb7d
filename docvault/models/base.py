"""SQLAlchemy declarative Base and shared model configuration."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase

# modified_by value for rows written without an authenticated caller
AUDIT_SENTINEL_ID = 1


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class AuditMixin:
    """
    Audit columns stamped on every write by docvault.services.auditing.stamp.

    created_by is the id of the caller that created the row (also the owner of
    documents); modified_by defaults to the sentinel when no caller is known.
    """

    created_by = Column(Integer, nullable=True, index=True)
    modified_by = Column(Integer, nullable=True, default=AUDIT_SENTINEL_ID)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    modified_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
