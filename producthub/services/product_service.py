"""
Product Service — product CRUD and per-product module toggles.

Reads go through the ownership/role accessor; renaming or deleting a
product additionally requires ownership.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import InvalidStateError, ValidationError
from producthub.models import db
from producthub.models.auth import User
from producthub.models.product import Product, ProductModule
from producthub.services.access import Principal
from producthub.services.helpers.scoped_queries import get_scoped
from producthub.services.module_service import list_active_modules
from producthub.services.product_access import (
    get_accessible_product,
    get_owned_product,
    list_accessible_products,
)
from producthub.utils.helpers import parse_int

logger = logging.getLogger(__name__)


def _clean_name(data: dict) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required", details={"name": "required"})
    name = name.strip()
    if len(name) > 200:
        raise ValidationError("name must be at most 200 characters", details={"name": "too_long"})
    return name


def list_products(principal: Principal) -> list[Product]:
    return list_accessible_products(principal.user_id)


def get_product(principal: Principal, product_id: int) -> Product:
    return get_accessible_product(principal.user_id, product_id)


def create_product(principal: Principal, data: dict) -> Product:
    """Create a product owned by the caller, enabling every active module."""
    name = _clean_name(data)
    user = db.session.get(User, principal.user_id)
    if user is None:
        raise InvalidStateError("Acting user no longer exists")

    product = Product(name=name, owner=user, organization_id=user.organization_id)
    db.session.add(product)
    for module in list_active_modules():
        product.product_modules.append(ProductModule(module=module))

    db.session.commit()
    logger.info(
        "Product %d '%s' created by user %d with %d module(s)",
        product.id, product.name, principal.user_id, len(product.product_modules),
    )
    return product


def update_product(principal: Principal, product_id: int, data: dict) -> Product:
    product = get_owned_product(principal.user_id, product_id)
    product.name = _clean_name(data)
    db.session.commit()
    logger.info("Product %d renamed by user %d", product.id, principal.user_id)
    return product


def delete_product(principal: Principal, product_id: int) -> None:
    product = get_owned_product(principal.user_id, product_id)
    db.session.delete(product)
    db.session.commit()
    logger.info("Product %d deleted by user %d", product_id, principal.user_id)


# ── Product modules ──────────────────────────────────────────────────────

def list_modules_for_product(principal: Principal, product_id: int) -> list[ProductModule]:
    product = get_accessible_product(principal.user_id, product_id)
    stmt = (
        select(ProductModule)
        .where(ProductModule.product_id == product.id)
        .order_by(ProductModule.id)
    )
    return db.session.execute(stmt).scalars().all()


def update_product_module(
    principal: Principal, product_id: int, product_module_id: int, data: dict,
) -> ProductModule:
    """Toggle a module or record its completion percentage (0–100)."""
    product = get_accessible_product(principal.user_id, product_id)
    pm = get_scoped(ProductModule, product_module_id, product_id=product.id)

    if "is_enabled" in data:
        if not isinstance(data["is_enabled"], bool):
            raise ValidationError("is_enabled must be a boolean", details={"is_enabled": "invalid"})
        pm.is_enabled = data["is_enabled"]
    if "completion_percentage" in data:
        pm.completion_percentage = parse_int(
            data["completion_percentage"], "completion_percentage", minimum=0, maximum=100,
        )

    db.session.commit()
    logger.info("Product module %d updated by user %d", pm.id, principal.user_id)
    return pm
