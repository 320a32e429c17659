"""
Product Blueprint — products, per-product modules, backlog and hypothesis.

  GET    /api/products                                — Accessible products
  POST   /api/products                                — Create (caller becomes owner)
  GET    /api/products/<id>                           — Product detail
  PUT    /api/products/<id>                           — Rename (owner only)
  DELETE /api/products/<id>                           — Delete (owner only)
  GET    /api/products/<id>/modules                   — Product modules
  PUT    /api/products/<id>/modules/<pm_id>           — Toggle / completion
  GET    /api/products/<id>/backlog                   — Backlog epics
  POST   /api/products/<id>/backlog                   — Replace backlog epics
  GET    /api/products/<id>/hypothesis                — Hypothesis canvas
  POST   /api/products/<id>/hypothesis                — Replace hypothesis canvas

A product the caller can neither own nor reach through their role answers
404, exactly like a missing one.
"""

import logging

from flask import Blueprint, jsonify

from producthub.blueprints import json_body
from producthub.middleware.permission_required import login_required
from producthub.services import backlog_service, product_service
from producthub.services.access import current_principal

logger = logging.getLogger(__name__)

product_bp = Blueprint("products", __name__, url_prefix="/api/products")


# ═══════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════
@product_bp.route("", methods=["GET"])
@login_required
def list_products():
    products = product_service.list_products(current_principal())
    return jsonify([p.to_dict() for p in products]), 200


@product_bp.route("", methods=["POST"])
@login_required
def create_product():
    product = product_service.create_product(current_principal(), json_body())
    return jsonify(product.to_dict()), 201


@product_bp.route("/<int:product_id>", methods=["GET"])
@login_required
def get_product(product_id):
    return jsonify(product_service.get_product(current_principal(), product_id).to_dict()), 200


@product_bp.route("/<int:product_id>", methods=["PUT"])
@login_required
def update_product(product_id):
    product = product_service.update_product(current_principal(), product_id, json_body())
    return jsonify(product.to_dict()), 200


@product_bp.route("/<int:product_id>", methods=["DELETE"])
@login_required
def delete_product(product_id):
    product_service.delete_product(current_principal(), product_id)
    return jsonify({"message": "Product deleted"}), 200


# ═══════════════════════════════════════════════════════════════
# Product modules
# ═══════════════════════════════════════════════════════════════
@product_bp.route("/<int:product_id>/modules", methods=["GET"])
@login_required
def list_product_modules(product_id):
    modules = product_service.list_modules_for_product(current_principal(), product_id)
    return jsonify([pm.to_dict() for pm in modules]), 200


@product_bp.route("/<int:product_id>/modules/<int:product_module_id>", methods=["PUT"])
@login_required
def update_product_module(product_id, product_module_id):
    pm = product_service.update_product_module(
        current_principal(), product_id, product_module_id, json_body(),
    )
    return jsonify(pm.to_dict()), 200


# ═══════════════════════════════════════════════════════════════
# Backlog
# ═══════════════════════════════════════════════════════════════
@product_bp.route("/<int:product_id>/backlog", methods=["GET"])
@login_required
def get_backlog(product_id):
    product = product_service.get_product(current_principal(), product_id)
    return jsonify(backlog_service.get_backlog(product)), 200


@product_bp.route("/<int:product_id>/backlog", methods=["POST"])
@login_required
def save_backlog(product_id):
    product = product_service.get_product(current_principal(), product_id)
    backlog = backlog_service.save_backlog(product, json_body())
    return jsonify(backlog.to_dict()), 200


# ═══════════════════════════════════════════════════════════════
# Hypothesis
# ═══════════════════════════════════════════════════════════════
@product_bp.route("/<int:product_id>/hypothesis", methods=["GET"])
@login_required
def get_hypothesis(product_id):
    product = product_service.get_product(current_principal(), product_id)
    return jsonify(backlog_service.get_hypothesis(product)), 200


@product_bp.route("/<int:product_id>/hypothesis", methods=["POST"])
@login_required
def save_hypothesis(product_id):
    product = product_service.get_product(current_principal(), product_id)
    hypothesis = backlog_service.save_hypothesis(product, json_body())
    return jsonify(hypothesis.to_dict()), 200
