"""
Organization Service — cross-organization management for global superadmins.

Unlike services/tenant_scope.py, nothing here is filtered by the caller's
organization; every entry point sits behind the global-admin gate.

Deleting an organization deletes its users. Products of the organization
(and products those users owned) are kept with their foreign keys set to
NULL.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from producthub.models import db
from producthub.models.auth import Organization, User
from producthub.models.product import Product
from producthub.services.user_service import (
    ensure_email_available,
    normalize_email,
    validate_password,
)
from producthub.utils.crypto import hash_password
from producthub.utils.helpers import commit_or_raise, parse_int

logger = logging.getLogger(__name__)


def _clean_org_name(data: dict) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required", details={"name": "required"})
    name = name.strip()
    if len(name) > 200:
        raise ValidationError("name must be at most 200 characters", details={"name": "too_long"})
    return name


# ═══════════════════════════════════════════════════════════════
# Organizations
# ═══════════════════════════════════════════════════════════════
def list_organizations() -> list[Organization]:
    return db.session.execute(
        select(Organization).order_by(Organization.name, Organization.id)
    ).scalars().all()


def get_organization(org_id: int) -> Organization:
    org = db.session.get(Organization, org_id)
    if org is None:
        raise NotFoundError(resource="Organization", resource_id=org_id)
    return org


def create_organization(data: dict) -> Organization:
    org = Organization(name=_clean_org_name(data), description=data.get("description"))
    db.session.add(org)
    db.session.commit()
    logger.info("Organization %d '%s' created", org.id, org.name)
    return org


def update_organization(org_id: int, data: dict) -> Organization:
    org = get_organization(org_id)
    org.name = _clean_org_name(data)
    if "description" in data:
        org.description = data.get("description")
    db.session.commit()
    logger.info("Organization %d updated", org.id)
    return org


def delete_organization(org_id: int, acting_user_id: int | None = None) -> None:
    org = get_organization(org_id)
    if acting_user_id is not None and org.users.filter(User.id == acting_user_id).count():
        raise InvalidStateError("You cannot delete your own organization")

    user_ids = [u.id for u in org.users]
    if user_ids:
        # Detach owned products explicitly; they outlive their owners.
        for product in db.session.execute(
            select(Product).where(Product.user_id.in_(user_ids))
        ).scalars():
            product.owner = None
    for product in org.products:
        product.organization = None

    db.session.delete(org)
    db.session.commit()
    logger.warning(
        "Organization %d deleted with %d user(s); products left orphaned", org_id, len(user_ids),
    )


# ═══════════════════════════════════════════════════════════════
# Superadmins & users
# ═══════════════════════════════════════════════════════════════
def list_superadmins(org_id: int) -> list[User]:
    get_organization(org_id)
    return db.session.execute(
        select(User)
        .where(User.organization_id == org_id, User.is_superadmin.is_(True))
        .order_by(User.email)
    ).scalars().all()


def list_org_users(org_id: int) -> list[User]:
    get_organization(org_id)
    return db.session.execute(
        select(User).where(User.organization_id == org_id).order_by(User.email)
    ).scalars().all()


def create_superadmin(data: dict) -> User:
    """Create an org admin (superadmin, never global) in the given organization."""
    org_id = parse_int(data.get("organization_id"), "organization_id")
    email = normalize_email(data.get("email"))
    password = validate_password(data.get("password"))
    org = get_organization(org_id)
    ensure_email_available(email)

    user = User(
        email=email,
        password_hash=hash_password(password),
        organization=org,
        is_superadmin=True,
        is_global_superadmin=False,
    )
    db.session.add(user)
    commit_or_raise("User", "email", email)
    logger.info("Superadmin %d created in organization %d", user.id, org.id)
    return user


def _get_non_global_user(user_id: int, action: str) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(resource="User", resource_id=user_id)
    if user.is_global_superadmin:
        raise InvalidStateError(f"Cannot {action} a global superadmin")
    return user


def update_superadmin(user_id: int, data: dict) -> User:
    """Change a user's email and, when provided, password."""
    user = _get_non_global_user(user_id, "modify")
    if data.get("email") is not None:
        email = normalize_email(data.get("email"))
        ensure_email_available(email, exclude_user_id=user.id)
        user.email = email
    if data.get("password"):
        user.password_hash = hash_password(validate_password(data["password"]))
    commit_or_raise("User", "email", user.email)
    logger.info("User %d credentials updated", user.id)
    return user


def set_superadmin(user_id: int, data: dict) -> User:
    user = _get_non_global_user(user_id, "modify")
    flag = data.get("is_superadmin")
    if flag is not None:
        if not isinstance(flag, bool):
            raise ValidationError("is_superadmin must be a boolean", details={"is_superadmin": "invalid"})
        user.is_superadmin = flag
        db.session.commit()
        logger.info("User %d superadmin status set to %s", user.id, flag)
    return user


def delete_user(user_id: int) -> None:
    user = _get_non_global_user(user_id, "delete")
    for product in user.products:
        product.owner = None
    db.session.delete(user)
    db.session.commit()
    logger.warning("User %d deleted", user_id)


def create_global_admin(email: str, password: str, org_name: str) -> User:
    """Bootstrap a global superadmin (CLI). Creates the organization if missing."""
    email = normalize_email(email)
    password = validate_password(password)
    ensure_email_available(email)

    org = db.session.execute(
        select(Organization).where(Organization.name == org_name)
    ).scalars().first()
    if org is None:
        org = Organization(name=org_name)
        db.session.add(org)

    user = User(
        email=email,
        password_hash=hash_password(password),
        organization=org,
        is_superadmin=True,
        is_global_superadmin=True,
    )
    db.session.add(user)
    commit_or_raise("User", "email", email)
    logger.info("Global superadmin %d created in organization '%s'", user.id, org.name)
    return user
