"""ORM model for JSON documents owned by principals."""

from sqlalchemy import JSON, Column, Integer, String
from sqlalchemy.dialects.postgresql import JSONB

from docvault.models.base import AuditMixin, Base


class Document(AuditMixin, Base):
    """
    Named, path-addressed JSON payload. The owner is the creator (created_by).

    Names are unique per owner, case-insensitively (enforced by the document service).
    """

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    payload = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
    path = Column(String(255), nullable=True)
