"""
Ownership/role accessor — who may see which product.

A user reaches a product either by owning it or through a product module
granted by their role. Product-scoped endpoints answer 404 for callers
without access, whether or not the product exists; only mutations of the
product itself distinguish "visible but not yours" (403).
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import ForbiddenError, NotFoundError
from producthub.models import db
from producthub.models.auth import User, role_product_modules
from producthub.models.product import Product, ProductModule

logger = logging.getLogger(__name__)


def _role_product_ids(role_id: int | None) -> set[int]:
    if role_id is None:
        return set()
    stmt = (
        select(ProductModule.product_id)
        .join(
            role_product_modules,
            role_product_modules.c.product_module_id == ProductModule.id,
        )
        .where(role_product_modules.c.role_id == role_id)
    )
    return set(db.session.execute(stmt).scalars().all())


def has_product_access(user_id: int, product_id: int) -> bool:
    """Owner, or the user's role grants a product module of the product."""
    product = db.session.get(Product, product_id)
    if product is None:
        return False
    if product.user_id is not None and product.user_id == user_id:
        return True
    user = db.session.get(User, user_id)
    if user is None:
        return False
    return product_id in _role_product_ids(user.role_id)


def list_accessible_products(user_id: int) -> list[Product]:
    """Owned products ∪ role-granted products, deduplicated, sorted by name.

    The sort is case-insensitive (``str.casefold``) and stable, so equal
    names keep ascending id order.
    """
    user = db.session.get(User, user_id)
    if user is None:
        return []

    owned = db.session.execute(
        select(Product).where(Product.user_id == user_id)
    ).scalars().all()

    by_id = {p.id: p for p in owned}
    granted_ids = _role_product_ids(user.role_id) - set(by_id)
    if granted_ids:
        granted = db.session.execute(
            select(Product).where(Product.id.in_(granted_ids))
        ).scalars().all()
        by_id.update((p.id, p) for p in granted)

    products = sorted(by_id.values(), key=lambda p: p.id)
    return sorted(products, key=lambda p: (p.name or "").casefold())


def get_accessible_product(user_id: int, product_id: int) -> Product:
    """Return the product or raise NotFoundError when the caller lacks access."""
    if not has_product_access(user_id, product_id):
        logger.info("User %d has no access to product %s", user_id, product_id)
        raise NotFoundError(resource="Product", resource_id=product_id)
    return db.session.get(Product, product_id)


def get_owned_product(user_id: int, product_id: int) -> Product:
    """Return a product the caller owns.

    Raises:
        NotFoundError: caller cannot see the product at all.
        ForbiddenError: caller can see it through a role but is not the owner.
    """
    product = get_accessible_product(user_id, product_id)
    if product.user_id != user_id:
        logger.warning("User %d attempted to modify product %d it does not own", user_id, product_id)
        raise ForbiddenError("Only the product owner can modify this product")
    return product
