"""Per-operation authorization preconditions, called at service entry points."""

from docvault.core.context import CallerIdentity
from docvault.core.errors import ForbiddenError
from docvault.models.user import Role


def require_caller(caller: CallerIdentity | None) -> CallerIdentity:
    """Return the caller, or raise ForbiddenError when the operation has none."""
    if caller is None:
        raise ForbiddenError("No authenticated caller", detail_key="error_auditor_empty")
    return caller


def require_role(caller: CallerIdentity | None, *roles: Role) -> CallerIdentity:
    """Raise ForbiddenError unless the caller holds one of roles."""
    caller = require_caller(caller)
    if caller.role not in roles:
        raise ForbiddenError(
            f"Role {caller.role.value} is not allowed; requires one of "
            + ", ".join(r.value for r in roles)
        )
    return caller
