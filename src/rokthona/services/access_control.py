"""
Role resolution and the guard predicates built on top of it.

Nothing here knows about HTTP. The FastAPI dependencies in ``api.guards``
wire these functions to the request; the data-access object and identity
provider are always passed in by the caller.

Guards fail closed: a missing user record or a store error is a denial.
"""

import logging
from typing import Iterable

from rokthona.core.errors import ApiError, Forbidden, NotFound, UpstreamFailure
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.user import Principal

logger = logging.getLogger(__name__)

ADMIN_ONLY = ("admin",)
VOLUNTEER_ONLY = ("volunteer",)
ADMIN_OR_VOLUNTEER = ("admin", "volunteer")


class RoleResolver:
    """Reads the stored role on every call; role changes apply to the next request."""

    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def resolve(self, email: str) -> str | None:
        return self.data_access.get_user_role(email)


def ensure_self(principal: Principal, email: str) -> None:
    if principal.email != email:
        logger.warning(f"{principal.email} attempted to act on behalf of {email}")
        raise Forbidden()


def ensure_role(resolver: RoleResolver, principal: Principal, allowed: Iterable[str],
                message: str = "Forbidden access") -> str:
    allowed = tuple(allowed)
    try:
        role = resolver.resolve(principal.email)
    except Exception as e:
        logger.error(f"Role lookup failed for {principal.email}, denying access: {e}")
        raise Forbidden(message) from e

    if role not in allowed:
        logger.warning(f"{principal.email} with role {role!r} denied; requires one of {allowed}")
        raise Forbidden(message)
    return role


def assign_role(data_access: DynamoDataAccess, identity_provider, email: str, role: str) -> dict:
    """
    Change a user's role in both the identity provider and the user directory.

    The claim is written first. If the directory write then fails, the claim
    is put back to the previous role and one UpstreamFailure is raised.
    """
    current = data_access.get_user(email)
    if current is None:
        raise NotFound("User not found")

    identity = identity_provider.get_user_by_email(email)
    identity_provider.set_role_claim(identity["username"], role)

    try:
        updated = data_access.update_user(email, {"role": role})
    except Exception as e:
        logger.error(f"Directory update failed after role claim changed for {email}: {e}")
        _restore_claim(identity_provider, identity["username"], current.get("role", "donor"))
        raise UpstreamFailure("Failed to update role") from e

    if updated is None:
        _restore_claim(identity_provider, identity["username"], current.get("role", "donor"))
        raise NotFound("User not found")

    logger.info(f"Role of {email} changed from {current.get('role')} to {role}")
    return updated


def _restore_claim(identity_provider, username: str, role: str) -> None:
    try:
        identity_provider.set_role_claim(username, role)
    except ApiError as e:
        logger.error(f"Could not restore role claim of {username} to {role}: {e.message}")
