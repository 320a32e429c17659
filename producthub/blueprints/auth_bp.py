"""
Auth Blueprint — JWT authentication endpoints.

Endpoints:
  POST /api/auth/login       — Email + password → access token
  POST /api/auth/refresh     — Valid access token → new access token
  POST /api/auth/logout      — Stateless; the client discards its token
  GET  /api/auth/me          — Current user profile
"""

import logging

from flask import Blueprint, jsonify

from producthub.blueprints import json_body
from producthub.middleware.permission_required import login_required
from producthub.services.access import current_principal
from producthub.services.jwt_service import token_response
from producthub.services.user_service import authenticate, get_user

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/login
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate with email + password, return an access token.

    Body: { "email": "...", "password": "..." }
    """
    data = json_body()
    user = authenticate(data.get("email"), data.get("password"))
    return jsonify(token_response(user)), 200


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/refresh
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/refresh", methods=["POST"])
@login_required
def refresh():
    """Issue a new token built from the current user row."""
    user = get_user(current_principal().user_id)
    return jsonify(token_response(user)), 200


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/logout
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/logout", methods=["POST"])
def logout():
    return jsonify({"message": "Logged out"}), 200


# ═══════════════════════════════════════════════════════════════
# GET /api/auth/me
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    user = get_user(current_principal().user_id)
    return jsonify({
        "user": user.to_dict(),
        "organization": user.organization.to_dict() if user.organization else None,
    }), 200
