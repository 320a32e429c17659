"""
Organizations Blueprint — global superadmin API.

  GET    /api/admin/organizations                      — All organizations
  POST   /api/admin/organizations                      — Create organization
  GET    /api/admin/organizations/<id>                 — Organization detail
  PUT    /api/admin/organizations/<id>                 — Rename / describe
  DELETE /api/admin/organizations/<id>                 — Delete with its users
  GET    /api/admin/organizations/<id>/users           — Users of an organization
  GET    /api/admin/organizations/<id>/superadmins     — Org admins
  POST   /api/admin/organizations/<id>/superadmins     — Create org admin
  PUT    /api/admin/superadmins/<user_id>              — Change email / password
  PUT    /api/admin/users/<user_id>/superadmin         — Grant / revoke superadmin
  DELETE /api/admin/users/<user_id>                    — Delete a user

Unlike admin_bp, nothing here is limited to the caller's organization.
Global superadmin accounts can never be modified or deleted through it.
"""

import logging

from flask import Blueprint, jsonify

from producthub.blueprints import json_body
from producthub.middleware.permission_required import global_admin_required
from producthub.services import organization_service as org_svc
from producthub.services.access import current_principal

logger = logging.getLogger(__name__)

organizations_bp = Blueprint("organizations", __name__, url_prefix="/api/admin")


# ═══════════════════════════════════════════════════════════════
# Organizations
# ═══════════════════════════════════════════════════════════════
@organizations_bp.route("/organizations", methods=["GET"])
@global_admin_required
def list_organizations():
    orgs = org_svc.list_organizations()
    return jsonify([o.to_dict(include_counts=True) for o in orgs]), 200


@organizations_bp.route("/organizations", methods=["POST"])
@global_admin_required
def create_organization():
    org = org_svc.create_organization(json_body())
    return jsonify(org.to_dict()), 201


@organizations_bp.route("/organizations/<int:org_id>", methods=["GET"])
@global_admin_required
def get_organization(org_id):
    return jsonify(org_svc.get_organization(org_id).to_dict(include_counts=True)), 200


@organizations_bp.route("/organizations/<int:org_id>", methods=["PUT"])
@global_admin_required
def update_organization(org_id):
    org = org_svc.update_organization(org_id, json_body())
    return jsonify(org.to_dict()), 200


@organizations_bp.route("/organizations/<int:org_id>", methods=["DELETE"])
@global_admin_required
def delete_organization(org_id):
    org_svc.delete_organization(org_id, acting_user_id=current_principal().user_id)
    return jsonify({"message": "Organization deleted"}), 200


@organizations_bp.route("/organizations/<int:org_id>/users", methods=["GET"])
@global_admin_required
def list_org_users(org_id):
    return jsonify([u.to_dict() for u in org_svc.list_org_users(org_id)]), 200


# ═══════════════════════════════════════════════════════════════
# Superadmins
# ═══════════════════════════════════════════════════════════════
@organizations_bp.route("/organizations/<int:org_id>/superadmins", methods=["GET"])
@global_admin_required
def list_superadmins(org_id):
    return jsonify([u.to_dict() for u in org_svc.list_superadmins(org_id)]), 200


@organizations_bp.route("/organizations/<int:org_id>/superadmins", methods=["POST"])
@global_admin_required
def create_superadmin(org_id):
    data = {**json_body(), "organization_id": org_id}
    user = org_svc.create_superadmin(data)
    return jsonify(user.to_dict()), 201


@organizations_bp.route("/superadmins/<int:user_id>", methods=["PUT"])
@global_admin_required
def update_superadmin(user_id):
    user = org_svc.update_superadmin(user_id, json_body())
    return jsonify(user.to_dict()), 200


@organizations_bp.route("/users/<int:user_id>/superadmin", methods=["PUT"])
@global_admin_required
def set_superadmin(user_id):
    user = org_svc.set_superadmin(user_id, json_body())
    return jsonify(user.to_dict()), 200


@organizations_bp.route("/users/<int:user_id>", methods=["DELETE"])
@global_admin_required
def delete_user(user_id):
    org_svc.delete_user(user_id)
    return jsonify({"message": "User deleted"}), 200
