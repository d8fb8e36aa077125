from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Depends, Header, Request

from ..core.errors import AuthError, ForbiddenError
from ..core.roles import ADMIN_ROLES, READ_ROLES, WRITE_ROLES, Forbidden, Principal, require_any_role
from ..core.security import authenticate
from ..middlewares import principal_ctx_var

TOKEN_HEADER = "x-auth-token"


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def get_current_principal(
    request: Request,
    x_auth_token: str | None = Header(default=None, alias=TOKEN_HEADER),
) -> Principal:
    token = (x_auth_token or "").strip()
    if not token:
        raise AuthError("No token, authorization denied")
    try:
        principal = authenticate(token)
    except ValueError as exc:
        raise AuthError("Token is not valid") from exc
    _set_principal(request, f"user:{principal.id}")
    return principal


def require_roles(*roles: str) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory: authenticate, then check the caller's role."""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        decision = require_any_role(principal, roles)
        if isinstance(decision, Forbidden):
            raise ForbiddenError(decision.message)
        return decision.principal

    return dependency


require_reader = require_roles(*READ_ROLES)
require_editor = require_roles(*WRITE_ROLES)
require_admin = require_roles(*ADMIN_ROLES)
