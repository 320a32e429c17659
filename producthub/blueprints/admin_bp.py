"""
Admin Blueprint — organization admin API.

API Endpoints (JSON):
  GET    /api/admin/roles                     — Roles held in the caller's organization
  POST   /api/admin/roles                     — Create role
  PUT    /api/admin/roles/<id>                — Update role
  DELETE /api/admin/roles/<id>                — Delete role (holders lose it)
  GET    /api/admin/users                     — Users of the caller's organization
  POST   /api/admin/users                     — Create user
  PUT    /api/admin/users/<id>                — Assign / clear role
  GET    /api/admin/modules                   — Active module catalog
  GET    /api/admin/product-modules           — Product modules of the organization
  GET    /api/admin/users/<id>/role-modules   — Product modules granted via role

Everything except role-modules requires a superadmin and is scoped to the
caller's own organization, global superadmins included.
"""

import logging

from flask import Blueprint, jsonify

from producthub.blueprints import json_body
from producthub.middleware.permission_required import login_required, org_admin_required
from producthub.services import role_service, tenant_scope, user_service
from producthub.services.access import current_principal
from producthub.services.module_service import list_active_modules

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# ═══════════════════════════════════════════════════════════════
# Roles
# ═══════════════════════════════════════════════════════════════
@admin_bp.route("/roles", methods=["GET"])
@org_admin_required
def list_roles():
    roles = tenant_scope.list_roles(current_principal())
    return jsonify([r.to_dict() for r in roles]), 200


@admin_bp.route("/roles", methods=["POST"])
@org_admin_required
def create_role():
    role = role_service.create_role(current_principal(), json_body())
    return jsonify(role.to_dict()), 201


@admin_bp.route("/roles/<int:role_id>", methods=["PUT"])
@org_admin_required
def update_role(role_id):
    role = role_service.update_role(current_principal(), role_id, json_body())
    return jsonify(role.to_dict()), 200


@admin_bp.route("/roles/<int:role_id>", methods=["DELETE"])
@org_admin_required
def delete_role(role_id):
    role_service.delete_role(current_principal(), role_id)
    return jsonify({"message": "Role deleted"}), 200


# ═══════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════
@admin_bp.route("/users", methods=["GET"])
@org_admin_required
def list_users():
    users = tenant_scope.list_users(current_principal())
    return jsonify([u.to_dict() for u in users]), 200


@admin_bp.route("/users", methods=["POST"])
@org_admin_required
def create_user():
    user = user_service.create_user(current_principal(), json_body())
    return jsonify(user.to_dict()), 201


@admin_bp.route("/users/<int:user_id>", methods=["PUT"])
@org_admin_required
def update_user(user_id):
    user = user_service.update_user(current_principal(), user_id, json_body())
    return jsonify(user.to_dict()), 200


@admin_bp.route("/users/<int:user_id>/role-modules", methods=["GET"])
@login_required
def user_role_modules(user_id):
    modules = user_service.get_role_modules(current_principal(), user_id)
    return jsonify([pm.to_dict() for pm in modules]), 200


# ═══════════════════════════════════════════════════════════════
# Module catalog
# ═══════════════════════════════════════════════════════════════
@admin_bp.route("/modules", methods=["GET"])
@org_admin_required
def list_modules():
    return jsonify([m.to_dict() for m in list_active_modules()]), 200


@admin_bp.route("/product-modules", methods=["GET"])
@org_admin_required
def list_product_modules():
    modules = tenant_scope.list_product_modules(current_principal())
    return jsonify([pm.to_dict() for pm in modules]), 200
