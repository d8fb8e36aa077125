"""Role constants and the capability check used by every protected route.

``require_any_role`` returns a decision object instead of raising so the
policy can be exercised without a request in flight. The FastAPI
dependencies in :mod:`asset_tracker.deps.auth` turn a ``Forbidden`` decision
into a 403 response.
"""

from __future__ import annotations

from typing import Iterable, Union

from pydantic import BaseModel

ROLE_ADMIN = "Admin"
ROLE_EDITOR = "Editor"
ROLE_VIEWER = "Viewer"

ROLE_CHOICES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER)
DEFAULT_ROLE = ROLE_VIEWER

READ_ROLES = ROLE_CHOICES
WRITE_ROLES = (ROLE_ADMIN, ROLE_EDITOR)
ADMIN_ROLES = (ROLE_ADMIN,)

_ROLE_BANNERS = {
    ROLE_VIEWER: "You have Viewer access – read-only mode and you will not be able to edit.",
}


class Principal(BaseModel):
    """The authenticated caller as carried inside an access token."""

    id: str
    role: str
    email: str


class Allowed:
    def __init__(self, principal: Principal) -> None:
        self.principal = principal


class Forbidden:
    def __init__(self, principal: Principal, allowed_roles: tuple[str, ...]) -> None:
        self.principal = principal
        self.allowed_roles = allowed_roles

    @property
    def message(self) -> str:
        return "Access denied. Insufficient role."


AccessDecision = Union[Allowed, Forbidden]


def require_any_role(principal: Principal, roles: Iterable[str]) -> AccessDecision:
    allowed_roles = tuple(roles)
    if principal.role in allowed_roles:
        return Allowed(principal)
    return Forbidden(principal, allowed_roles)


def role_banner(role: str | None) -> str | None:
    """Banner text shown by the frontend for the given role, if any."""

    return _ROLE_BANNERS.get(role or "")


def is_valid_role(value: object) -> bool:
    return isinstance(value, str) and value in ROLE_CHOICES
