"""
Permission Decorators — apply the authorization gate per route.

Usage:
    @bp.route("/api/admin/roles", methods=["GET"])
    @org_admin_required
    def list_roles():
        principal = current_principal()
        ...

    @bp.route("/api/admin/organizations", methods=["GET"])
    @global_admin_required
    def list_organizations():
        ...

The decorators halt the request with a JSON 401/403 before the view
runs; views only ever see an authenticated, sufficiently privileged
principal.
"""

import functools
import logging

from flask import g

from producthub.core.exceptions import ForbiddenError
from producthub.services.access import require_global_admin, require_org_admin
from producthub.utils.errors import E, api_error

logger = logging.getLogger(__name__)


def _unauthenticated(f):
    logger.info("Unauthenticated request rejected on %s", f.__name__)
    return api_error(E.UNAUTHENTICATED, "Authentication required", status=401)


def login_required(f):
    """Decorator: require a resolved principal."""

    @functools.wraps(f)
    def decorated(*args, **kwargs):
        if getattr(g, "principal", None) is None:
            return _unauthenticated(f)
        return f(*args, **kwargs)

    return decorated


def _gate(check):
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            principal = getattr(g, "principal", None)
            if principal is None:
                return _unauthenticated(f)
            try:
                check(principal)
            except ForbiddenError as exc:
                logger.warning("User %d denied on %s", principal.user_id, f.__name__)
                return api_error(E.FORBIDDEN, str(exc), status=403)
            return f(*args, **kwargs)

        return decorated

    return decorator


org_admin_required = _gate(require_org_admin)
org_admin_required.__doc__ = "Decorator: require superadmin (org-admin) privileges."

global_admin_required = _gate(require_global_admin)
global_admin_required.__doc__ = "Decorator: require global superadmin privileges."
