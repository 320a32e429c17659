"""
Tenant-scoped accessor — organization-bound reads for org-admin endpoints.

Every function here filters by ``principal.organization_id``, including
for global superadmins. Cross-organization management lives only in
services/organization_service.py behind the global-admin gate.

Role visibility in listings is derived: a role is visible to an
organization while at least one of its users holds it. Management rights
follow the creating organization recorded on the role.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import InvalidStateError
from producthub.models import db
from producthub.models.auth import Role, User
from producthub.models.product import Product, ProductModule
from producthub.services.access import Principal

logger = logging.getLogger(__name__)


def require_organization(principal: Principal) -> int:
    """Return the principal's organization id, or raise InvalidStateError."""
    if principal.organization_id is None:
        logger.warning("User %d has no organization", principal.user_id)
        raise InvalidStateError("Acting user is not assigned to an organization")
    return principal.organization_id


def list_users(principal: Principal) -> list[User]:
    org_id = require_organization(principal)
    stmt = select(User).where(User.organization_id == org_id).order_by(User.email)
    return db.session.execute(stmt).scalars().all()


def list_roles(principal: Principal) -> list[Role]:
    """Distinct roles currently held by users of the principal's organization."""
    return roles_visible_to(require_organization(principal))


def roles_visible_to(org_id: int) -> list[Role]:
    stmt = (
        select(Role)
        .join(User, User.role_id == Role.id)
        .where(User.organization_id == org_id)
        .distinct()
        .order_by(Role.name, Role.id)
    )
    return db.session.execute(stmt).scalars().all()


def list_product_modules(principal: Principal) -> list[ProductModule]:
    """Product modules whose product belongs to the principal's organization."""
    org_id = require_organization(principal)
    stmt = (
        select(ProductModule)
        .join(Product, ProductModule.product_id == Product.id)
        .where(Product.organization_id == org_id)
        .order_by(Product.name, ProductModule.id)
    )
    return db.session.execute(stmt).scalars().all()


def product_module_ids_in_org(org_id: int, ids) -> set[int]:
    """Subset of ``ids`` that are product modules of products in ``org_id``."""
    ids = set(ids)
    if not ids:
        return set()
    stmt = (
        select(ProductModule.id)
        .join(Product, ProductModule.product_id == Product.id)
        .where(ProductModule.id.in_(ids), Product.organization_id == org_id)
    )
    return set(db.session.execute(stmt).scalars().all())


def role_manageable_by(role: Role, org_id: int) -> bool:
    """True when the role belongs to ``org_id`` and touches nothing outside it.

    A role created by another organization never qualifies. Rows without a
    recorded creator fall back to the holder and product module checks: no
    user of another organization holds it, and every product module it
    grants belongs to a product of ``org_id``.
    """
    if role.organization_id is not None and role.organization_id != org_id:
        return False
    foreign_holder = db.session.execute(
        select(User.id).where(
            User.role_id == role.id,
            (User.organization_id != org_id) | (User.organization_id.is_(None)),
        ).limit(1)
    ).first()
    if foreign_holder is not None:
        return False
    for pm in role.product_modules:
        if pm.product is None or pm.product.organization_id != org_id:
            return False
    return True
