"""
Capacity Planning Blueprint — teams, quarterly plans, effort rating thresholds.

  GET    /api/products/<id>/capacity-planning/teams                   — Active teams
  POST   /api/products/<id>/capacity-planning/teams                   — Create team
  PUT    /api/products/<id>/capacity-planning/teams/<team_id>         — Update team
  DELETE /api/products/<id>/capacity-planning/teams/<team_id>         — Deactivate team
  GET    /api/products/<id>/capacity-planning/<year>/<quarter>        — Plan (created on first read)
  POST   /api/products/<id>/capacity-planning/<year>/<quarter>        — Save {effort_unit, epic_efforts}
  GET    /api/products/<id>/capacity-planning/effort-rating-config    — Threshold configs
  PUT    /api/products/<id>/capacity-planning/effort-rating-config    — Upsert thresholds
"""

import logging

from flask import Blueprint, jsonify

from producthub.blueprints import json_body
from producthub.middleware.permission_required import login_required
from producthub.services import capacity_service, effort_rating
from producthub.services.access import current_principal
from producthub.services.product_access import get_accessible_product

logger = logging.getLogger(__name__)

capacity_bp = Blueprint(
    "capacity", __name__, url_prefix="/api/products/<int:product_id>/capacity-planning",
)


def _product(product_id):
    return get_accessible_product(current_principal().user_id, product_id)


# ═══════════════════════════════════════════════════════════════
# Teams
# ═══════════════════════════════════════════════════════════════
@capacity_bp.route("/teams", methods=["GET"])
@login_required
def list_teams(product_id):
    teams = capacity_service.list_active_teams(_product(product_id).id)
    return jsonify([t.to_dict() for t in teams]), 200


@capacity_bp.route("/teams", methods=["POST"])
@login_required
def create_team(product_id):
    team = capacity_service.create_team(_product(product_id), json_body())
    return jsonify(team.to_dict()), 201


@capacity_bp.route("/teams/<int:team_id>", methods=["PUT"])
@login_required
def update_team(product_id, team_id):
    team = capacity_service.update_team(_product(product_id), team_id, json_body())
    return jsonify(team.to_dict()), 200


@capacity_bp.route("/teams/<int:team_id>", methods=["DELETE"])
@login_required
def deactivate_team(product_id, team_id):
    capacity_service.deactivate_team(_product(product_id), team_id)
    return jsonify({"message": "Team deactivated"}), 200


# ═══════════════════════════════════════════════════════════════
# Plans
# ═══════════════════════════════════════════════════════════════
@capacity_bp.route("/<int:year>/<int:quarter>", methods=["GET"])
@login_required
def get_plan(product_id, year, quarter):
    plan, teams = capacity_service.get_or_create_plan(_product(product_id), year, quarter)
    return jsonify(plan.to_dict(teams=teams)), 200


@capacity_bp.route("/<int:year>/<int:quarter>", methods=["POST"])
@login_required
def save_plan(product_id, year, quarter):
    product = _product(product_id)
    plan = capacity_service.save_plan(product, year, quarter, json_body())
    teams = capacity_service.list_active_teams(product.id)
    return jsonify(plan.to_dict(teams=teams)), 200


# ═══════════════════════════════════════════════════════════════
# Effort rating thresholds
# ═══════════════════════════════════════════════════════════════
@capacity_bp.route("/effort-rating-config", methods=["GET"])
@login_required
def list_rating_configs(product_id):
    configs = effort_rating.list_configs(_product(product_id).id)
    return jsonify([c.to_dict() for c in configs]), 200


@capacity_bp.route("/effort-rating-config", methods=["PUT"])
@login_required
def save_rating_config(product_id):
    config = effort_rating.save_config(_product(product_id), json_body())
    return jsonify(config.to_dict()), 200
