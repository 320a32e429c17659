"""
Tenant Context Middleware — resolves the request principal from JWT claims.

When a JWT-authenticated user makes a request:
  1. g.jwt_claims is already set by jwt_auth middleware
  2. This middleware re-reads the user row and builds g.principal
  3. g.organization_id / g.user_id feed the logging context filter

This middleware does NOT block requests: a token for a deleted user just
leaves g.principal unset and the permission decorators return 401.

Chain order:
  jwt_auth.py  →  tenant_context.py  →  route handler
"""

import logging

from flask import g, request

from producthub.core.exceptions import AuthenticationError
from producthub.services.access import resolve_principal

logger = logging.getLogger(__name__)


def init_tenant_context(app):
    """Register tenant context middleware as a before_request hook."""

    @app.before_request
    def _tenant_context():
        g.principal = None
        g.user_id = None
        g.organization_id = None

        if not request.path.startswith("/api/"):
            return None

        claims = getattr(g, "jwt_claims", None)
        if not claims:
            return None

        try:
            principal = resolve_principal(claims)
        except AuthenticationError:
            logger.warning("JWT subject %s could not be resolved", claims.get("sub"))
            return None

        g.principal = principal
        g.user_id = principal.user_id
        g.organization_id = principal.organization_id
        return None

    logger.info("Tenant context middleware installed")
