"""Auditor provider: who is writing, and the one place audit columns are stamped."""

from docvault.core.context import get_current_caller
from docvault.models.base import AUDIT_SENTINEL_ID, AuditMixin


def current_caller_id() -> int | None:
    """Id of the authenticated caller of the current request, or None."""
    caller = get_current_caller()
    return caller.caller_id if caller is not None else None


def stamp(entity: AuditMixin, caller_id: int | None = None) -> AuditMixin:
    """
    Set created_by (new rows only) and modified_by before an insert or update.

    caller_id defaults to the current request's caller. Without a caller the
    write still goes through: created_by stays null and modified_by gets the sentinel.
    """
    if caller_id is None:
        caller_id = current_caller_id()
    if getattr(entity, "id", None) is None and entity.created_by is None:
        entity.created_by = caller_id
    entity.modified_by = caller_id if caller_id is not None else AUDIT_SENTINEL_ID
    return entity
