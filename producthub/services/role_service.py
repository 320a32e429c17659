"""
Role Service — org-admin role management.

Roles are global rows with a unique name. Each records the organization
that created it; an org admin may only attach product modules of their
own organization's products and may only edit, delete or assign roles
their organization created.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import ConflictError, NotFoundError, ValidationError
from producthub.models import db
from producthub.models.auth import Role
from producthub.models.product import ProductModule
from producthub.services.access import Principal
from producthub.services.tenant_scope import (
    product_module_ids_in_org,
    require_organization,
    role_manageable_by,
)
from producthub.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required", details={"name": "required"})
    name = name.strip()
    if len(name) > 100:
        raise ValidationError("name must be at most 100 characters", details={"name": "too_long"})
    return name


def _ensure_name_available(name: str, exclude_role_id: int | None = None) -> None:
    existing = db.session.execute(select(Role).where(Role.name == name)).scalar_one_or_none()
    if existing is not None and existing.id != exclude_role_id:
        raise ConflictError(resource="Role", field="name", value=name)


def _resolve_product_modules(raw_ids, org_id: int) -> list[ProductModule]:
    """Load product modules, rejecting any that are not in ``org_id``.

    Validation happens before anything is added to the session, so a
    rejected request leaves no partial role behind.
    """
    if raw_ids is None:
        return []
    if not isinstance(raw_ids, list):
        raise ValidationError(
            "product_module_ids must be a list", details={"product_module_ids": "invalid"},
        )
    try:
        ids = [int(i) for i in raw_ids]
    except (TypeError, ValueError):
        raise ValidationError(
            "product_module_ids must contain integers",
            details={"product_module_ids": "invalid"},
        )

    allowed = product_module_ids_in_org(org_id, ids)
    rejected = sorted(set(ids) - allowed)
    if rejected:
        logger.warning(
            "Role rejected: product modules %s are outside organization %d", rejected, org_id,
        )
        raise ValidationError(
            "Product modules must belong to your organization",
            details={"product_module_ids": rejected},
        )
    if not ids:
        return []
    return db.session.execute(
        select(ProductModule).where(ProductModule.id.in_(ids)).order_by(ProductModule.id)
    ).scalars().all()


def get_manageable_role(principal: Principal, role_id: int) -> Role:
    org_id = require_organization(principal)
    role = db.session.get(Role, role_id)
    if role is None or not role_manageable_by(role, org_id):
        raise NotFoundError(resource="Role", resource_id=role_id)
    return role


def create_role(principal: Principal, data: dict) -> Role:
    org_id = require_organization(principal)
    name = _clean_name(data.get("name"))
    _ensure_name_available(name)
    modules = _resolve_product_modules(data.get("product_module_ids"), org_id)

    role = Role(name=name, description=data.get("description"), organization_id=org_id)
    role.product_modules = modules
    db.session.add(role)
    commit_or_raise("Role", "name", name)
    logger.info("Role %d '%s' created by user %d", role.id, role.name, principal.user_id)
    return role


def update_role(principal: Principal, role_id: int, data: dict) -> Role:
    role = get_manageable_role(principal, role_id)
    org_id = principal.organization_id

    if data.get("name") is not None:
        name = _clean_name(data["name"])
        _ensure_name_available(name, exclude_role_id=role.id)
        role.name = name
    if data.get("description") is not None:
        role.description = data["description"]
    if data.get("product_module_ids") is not None:
        role.product_modules = _resolve_product_modules(data["product_module_ids"], org_id)

    commit_or_raise("Role", "name", role.name)
    logger.info("Role %d updated by user %d", role.id, principal.user_id)
    return role


def delete_role(principal: Principal, role_id: int) -> None:
    """Delete a role; its holders are left without a role."""
    role = get_manageable_role(principal, role_id)
    for holder in list(role.users):
        holder.role = None
    db.session.delete(role)
    db.session.commit()
    logger.info("Role %d deleted by user %d", role_id, principal.user_id)
