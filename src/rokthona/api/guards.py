"""
Route guards.

Every guarded route depends on ``get_current_principal``; role guards depend
on it as well, so the token is always verified before any role lookup.

Usage:
    @router.get("/admin/stats")
    def admin_stats(principal: Principal = Depends(require_admin)):
        ...
"""

from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rokthona.core.dependencies import get_data_access, get_identity_provider
from rokthona.core.errors import Unauthenticated
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.user import Principal
from rokthona.services.access_control import (
    ADMIN_ONLY,
    ADMIN_OR_VOLUNTEER,
    VOLUNTEER_ONLY,
    RoleResolver,
    ensure_role,
    ensure_self,
)

security = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    identity_provider=Depends(get_identity_provider),
) -> Principal:
    # A missing or non-Bearer header never reaches the identity provider.
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    return identity_provider.verify(credentials.credentials)


def get_role_resolver(data_access: DynamoDataAccess = Depends(get_data_access)) -> RoleResolver:
    return RoleResolver(data_access)


def require_roles(allowed: tuple[str, ...], message: str) -> Callable[..., Principal]:
    def role_guard(
        principal: Principal = Depends(get_current_principal),
        resolver: RoleResolver = Depends(get_role_resolver),
    ) -> Principal:
        ensure_role(resolver, principal, allowed, message)
        return principal

    return role_guard


require_admin = require_roles(ADMIN_ONLY, "Forbidden: Admins only")
require_volunteer = require_roles(VOLUNTEER_ONLY, "Forbidden: Volunteers only")
require_admin_or_volunteer = require_roles(ADMIN_OR_VOLUNTEER, "Forbidden: Admins or Volunteers only")


def require_self(email: str, principal: Principal = Depends(get_current_principal)) -> Principal:
    """``email`` comes from the path, or from the query string on listing routes."""
    ensure_self(principal, email)
    return principal
