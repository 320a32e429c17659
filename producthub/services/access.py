"""
Principal resolution and the authorization gate.

A Principal is built from the *current* user row, never from the
privilege claims embedded in the bearer token, so a demoted admin loses
access on the next request rather than when the token expires.

Usage:
    principal = current_principal()
    require_org_admin(principal)
    require_self_or_above(principal, user_id)
"""

import logging
from dataclasses import dataclass

from flask import g, has_request_context

from producthub.core.exceptions import AuthenticationError, ForbiddenError
from producthub.models import db
from producthub.models.auth import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: int
    organization_id: int | None
    is_superadmin: bool
    is_global_superadmin: bool
    email: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            user_id=user.id,
            organization_id=user.organization_id,
            is_superadmin=bool(user.is_superadmin),
            is_global_superadmin=bool(user.is_global_superadmin),
            email=user.email,
        )


# ═══════════════════════════════════════════════════════════════
# Principal resolver
# ═══════════════════════════════════════════════════════════════
def resolve_principal(claims: dict | None) -> Principal:
    """Build a Principal from verified token claims and a fresh user lookup.

    Raises:
        AuthenticationError: claims missing, or the user no longer exists.
    """
    if not claims or claims.get("sub") is None:
        raise AuthenticationError()

    user = db.session.get(User, claims["sub"])
    if user is None:
        logger.warning("Token subject %s no longer exists", claims.get("sub"))
        raise AuthenticationError("User no longer exists")

    principal = Principal.from_user(user)
    if (
        claims.get("is_superadmin") != principal.is_superadmin
        or claims.get("is_global_superadmin") != principal.is_global_superadmin
        or claims.get("organization_id") != principal.organization_id
    ):
        logger.info("Stale token claims for user %d; using current privileges", user.id)
    return principal


def current_principal() -> Principal:
    """The request's principal, as resolved by the tenant context middleware."""
    principal = getattr(g, "principal", None) if has_request_context() else None
    if principal is None:
        raise AuthenticationError()
    return principal


# ═══════════════════════════════════════════════════════════════
# Authorization gate
# ═══════════════════════════════════════════════════════════════
def require_self_or_above(principal: Principal, resource_owner_id: int) -> None:
    """Allow the resource owner, or any (global) superadmin."""
    if principal.user_id == resource_owner_id:
        return
    if principal.is_superadmin or principal.is_global_superadmin:
        return
    logger.warning(
        "User %d denied access to resource owned by user %s",
        principal.user_id, resource_owner_id,
    )
    raise ForbiddenError("Access denied")


def require_org_admin(principal: Principal) -> None:
    """Require superadmin privileges. Does not scope; scoping is the accessor's job.

    Global superadmins pass even when the superadmin flag itself is unset.
    """
    if principal.is_superadmin or principal.is_global_superadmin:
        return
    logger.warning("User %d denied: superadmin privileges required", principal.user_id)
    raise ForbiddenError("Access denied. Superadmin privileges required.")


def require_global_admin(principal: Principal) -> None:
    if principal.is_global_superadmin:
        return
    logger.warning("User %d denied: global superadmin privileges required", principal.user_id)
    raise ForbiddenError("Access denied. Global superadmin privileges required.")
