"""Route access policy table: which callers may reach which URL prefixes."""

from dataclasses import dataclass
from enum import Enum

from docvault.core.context import CallerIdentity
from docvault.core.errors import AuthenticationRequiredError, ForbiddenError
from docvault.models.user import MANAGER_ROLES, Role


class Requirement(Enum):
    NONE = "none"
    AUTHENTICATED = "authenticated"
    MANAGER = "manager"


@dataclass(frozen=True)
class RouteRule:
    prefix: str
    requirement: Requirement
    exact: bool = False

    def matches(self, path: str) -> bool:
        if self.exact:
            return path == self.prefix
        return path == self.prefix.rstrip("/") or path.startswith(self.prefix)


def build_route_rules(api_prefix: str) -> list[RouteRule]:
    """Policy table for the API mounted at api_prefix; first match wins, default AUTHENTICATED."""
    p = api_prefix.rstrip("/")
    return [
        RouteRule("/", Requirement.NONE, exact=True),
        RouteRule("/docs", Requirement.NONE),
        RouteRule("/redoc", Requirement.NONE),
        RouteRule("/openapi.json", Requirement.NONE, exact=True),
        RouteRule(f"{p}/public/", Requirement.NONE),
        RouteRule(f"{p}/auth/", Requirement.NONE),
        RouteRule(f"{p}/test/", Requirement.NONE),
        RouteRule(f"{p}/health", Requirement.NONE),
        RouteRule(f"{p}/authenticated/", Requirement.AUTHENTICATED),
        RouteRule(f"{p}/management/", Requirement.MANAGER),
    ]


class RoutePolicy:
    """Checks the route-level requirement for a path against the request's caller."""

    def __init__(self, rules: list[RouteRule], anonymous_forbidden: bool = False) -> None:
        self.rules = rules
        self.anonymous_forbidden = anonymous_forbidden

    def requirement_for(self, path: str) -> Requirement:
        for rule in self.rules:
            if rule.matches(path):
                return rule.requirement
        return Requirement.AUTHENTICATED

    def check(self, path: str, caller: CallerIdentity | None) -> None:
        """Raise AuthenticationRequiredError or ForbiddenError when the caller may not reach path."""
        requirement = self.requirement_for(path)
        if requirement is Requirement.NONE:
            return
        if caller is None:
            if self.anonymous_forbidden:
                raise ForbiddenError(f"Anonymous access to {path} is not allowed")
            raise AuthenticationRequiredError(f"Authentication required for {path}")
        if requirement is Requirement.MANAGER and caller.role not in MANAGER_ROLES:
            raise ForbiddenError(
                f"Role {caller.role.value} is not allowed; requires one of "
                + ", ".join(r.value for r in (Role.ADMIN, Role.SUPERVISOR))
            )
