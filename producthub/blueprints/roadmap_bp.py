"""
Roadmap Blueprint — quarterly roadmaps of a product.

  GET    /api/products/<id>/roadmap                                   — All quarters
  POST   /api/products/<id>/roadmap                                   — Save {year, quarter, roadmap_items}
  GET    /api/products/<id>/roadmap/<year>/<quarter>                  — One quarter
  POST   /api/products/<id>/roadmap/<year>/<quarter>                  — Save {roadmap_items}
  DELETE /api/products/<id>/roadmap/<year>/<quarter>                  — Delete quarter
  PUT    /api/products/<id>/roadmap/<year>/<quarter>/epics/<epic_id>/effort-rating
  GET    /api/products/<id>/roadmap/years                             — Years with roadmaps
  GET    /api/products/<id>/roadmap/years/<year>/quarters             — Quarters of a year
  GET    /api/products/<id>/roadmap/assigned-epics                    — Planned epic ids

Saving a quarter that contains an epic planned in another quarter answers
409 with the conflicting epics in ``details.conflicts``.
"""

import logging

from flask import Blueprint, jsonify, request

from producthub.blueprints import json_body
from producthub.middleware.permission_required import login_required
from producthub.services import roadmap_service
from producthub.services.access import current_principal
from producthub.services.product_access import get_accessible_product

logger = logging.getLogger(__name__)

roadmap_bp = Blueprint("roadmap", __name__, url_prefix="/api/products/<int:product_id>/roadmap")


def _product(product_id):
    return get_accessible_product(current_principal().user_id, product_id)


@roadmap_bp.route("", methods=["GET"])
@login_required
def list_roadmaps(product_id):
    product = _product(product_id)
    roadmaps = roadmap_service.list_roadmaps(product)
    return jsonify([roadmap_service.roadmap_to_dict(r) for r in roadmaps]), 200


@roadmap_bp.route("", methods=["POST"])
@login_required
def save_roadmap(product_id):
    product = _product(product_id)
    data = json_body()
    roadmap = roadmap_service.save_roadmap(
        product, data.get("year"), data.get("quarter"), data.get("roadmap_items"),
    )
    return jsonify(roadmap_service.roadmap_to_dict(roadmap)), 200


@roadmap_bp.route("/<int:year>/<int:quarter>", methods=["GET"])
@login_required
def get_quarter(product_id, year, quarter):
    roadmap = roadmap_service.get_roadmap(_product(product_id), year, quarter)
    return jsonify(roadmap_service.roadmap_to_dict(roadmap)), 200


@roadmap_bp.route("/<int:year>/<int:quarter>", methods=["POST"])
@login_required
def save_quarter(product_id, year, quarter):
    product = _product(product_id)
    roadmap = roadmap_service.save_roadmap(
        product, year, quarter, json_body().get("roadmap_items"),
    )
    return jsonify(roadmap_service.roadmap_to_dict(roadmap)), 200


@roadmap_bp.route("/<int:year>/<int:quarter>", methods=["DELETE"])
@login_required
def delete_quarter(product_id, year, quarter):
    roadmap_service.delete_roadmap(_product(product_id), year, quarter)
    return jsonify({"message": "Roadmap deleted"}), 200


@roadmap_bp.route(
    "/<int:year>/<int:quarter>/epics/<path:epic_id>/effort-rating", methods=["PUT"],
)
@login_required
def update_effort_rating(product_id, year, quarter, epic_id):
    item = roadmap_service.update_effort_rating(
        _product(product_id), year, quarter, epic_id, json_body(),
    )
    return jsonify(item.to_dict()), 200


@roadmap_bp.route("/years", methods=["GET"])
@login_required
def list_years(product_id):
    return jsonify({"years": roadmap_service.list_years(_product(product_id))}), 200


@roadmap_bp.route("/years/<int:year>/quarters", methods=["GET"])
@login_required
def list_quarters(product_id, year):
    quarters = roadmap_service.list_quarters(_product(product_id), year)
    return jsonify({"year": year, "quarters": quarters}), 200


@roadmap_bp.route("/assigned-epics", methods=["GET"])
@login_required
def assigned_epics(product_id):
    epic_ids = roadmap_service.assigned_epic_ids(
        _product(product_id),
        exclude_year=request.args.get("exclude_year"),
        exclude_quarter=request.args.get("exclude_quarter"),
    )
    return jsonify({"epic_ids": epic_ids}), 200
