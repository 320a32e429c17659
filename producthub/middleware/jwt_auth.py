"""
JWT Auth Middleware — Parses JWT from Authorization header, sets g.jwt_claims.

The middleware never rejects a request itself: an absent, expired or
forged token simply leaves ``g.jwt_claims`` empty, and the route's
``@login_required`` decorator answers 401.

Chain order:
  jwt_auth.py  →  tenant_context.py  →  permission decorators  →  route handler
"""

import logging

import jwt as pyjwt
from flask import g, request

from producthub.services.jwt_service import decode_access_token

logger = logging.getLogger(__name__)

# Paths that skip JWT auth entirely
JWT_SKIP_PREFIXES = (
    "/api/auth/login",
    "/api/health",
)


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        # Clear JWT context
        g.jwt_claims = None

        path = request.path
        if not path.startswith("/api/"):
            return
        for prefix in JWT_SKIP_PREFIXES:
            if path.startswith(prefix):
                return

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return

        token = auth_header[7:]  # Strip "Bearer "

        try:
            payload = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            logger.info("Expired access token on %s", path)
            return
        except pyjwt.InvalidTokenError as exc:
            logger.warning("Invalid access token on %s: %s", path, exc)
            return

        g.jwt_claims = payload
