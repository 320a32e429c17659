"""
User Service — login, org-scoped user management, role-module lookup.
"""

import logging

from email_validator import EmailNotValidError, validate_email
from flask import current_app
from sqlalchemy import func, select

from producthub.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from producthub.models import db
from producthub.models.auth import Role, User
from producthub.services.access import Principal, require_self_or_above
from producthub.services.helpers.scoped_queries import get_scoped
from producthub.services.tenant_scope import require_organization, role_manageable_by
from producthub.utils.crypto import hash_password, verify_password
from producthub.utils.helpers import commit_or_raise

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 6


# ═══════════════════════════════════════════════════════════════
# Validation helpers
# ═══════════════════════════════════════════════════════════════
def normalize_email(email) -> str:
    """Validate syntax and return the lower-cased normalized address."""
    if not email or not isinstance(email, str):
        raise ValidationError("email is required", details={"email": "required"})
    try:
        valid = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {e}", details={"email": "invalid"})
    return valid.normalized.lower()


def validate_password(password) -> str:
    min_len = current_app.config.get("MIN_PASSWORD_LENGTH", DEFAULT_MIN_PASSWORD_LENGTH)
    if not password or not isinstance(password, str):
        raise ValidationError("password is required", details={"password": "required"})
    if len(password) < min_len:
        raise ValidationError(
            f"password must be at least {min_len} characters",
            details={"password": "too_short"},
        )
    return password


def get_user_by_email(email: str) -> User | None:
    return db.session.execute(
        select(User).where(func.lower(User.email) == email.lower())
    ).scalar_one_or_none()


def ensure_email_available(email: str, exclude_user_id: int | None = None) -> None:
    existing = get_user_by_email(email)
    if existing is not None and existing.id != exclude_user_id:
        raise ConflictError(resource="User", field="email", value=email)


# ═══════════════════════════════════════════════════════════════
# Authentication
# ═══════════════════════════════════════════════════════════════
def authenticate(email, password) -> User:
    """Return the user for valid credentials, else raise AuthenticationError.

    Unknown email and wrong password produce the same error.
    """
    if not email or not password:
        raise ValidationError("email and password are required")
    user = get_user_by_email(str(email).strip())
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed for email: %s", email)
        raise AuthenticationError("Invalid email or password")
    logger.info("User logged in: %s", user.email)
    return user


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(resource="User", resource_id=user_id)
    return user


# ═══════════════════════════════════════════════════════════════
# Org-admin user management
# ═══════════════════════════════════════════════════════════════
def _resolve_assignable_role(role_id, org_id: int) -> Role | None:
    if role_id is None:
        return None
    role = db.session.get(Role, role_id)
    if role is None or not role_manageable_by(role, org_id):
        raise NotFoundError(resource="Role", resource_id=role_id)
    return role


def create_user(principal: Principal, data: dict) -> User:
    """Create a regular (non-admin) user in the principal's organization."""
    org_id = require_organization(principal)
    email = normalize_email(data.get("email"))
    password = validate_password(data.get("password"))
    ensure_email_available(email)
    role = _resolve_assignable_role(data.get("role_id"), org_id)

    user = User(
        email=email,
        password_hash=hash_password(password),
        organization_id=org_id,
        is_superadmin=False,
        is_global_superadmin=False,
        role=role,
    )
    db.session.add(user)
    commit_or_raise("User", "email", email)
    logger.info("User %d created in organization %d by user %d", user.id, org_id, principal.user_id)
    return user


def update_user(principal: Principal, user_id: int, data: dict) -> User:
    """Assign (or clear, with ``role_id: null``) a user's role."""
    org_id = require_organization(principal)
    user = get_scoped(User, user_id, organization_id=org_id)

    if "role_id" in data:
        user.role = _resolve_assignable_role(data.get("role_id"), org_id)

    db.session.commit()
    logger.info(
        "User %d updated by user %d (role_id=%s)", user.id, principal.user_id, user.role_id,
    )
    return user


def get_role_modules(principal: Principal, user_id: int) -> list:
    """Product modules granted to a user through their role.

    Users may read their own; org admins may read users of their organization.
    """
    require_self_or_above(principal, user_id)
    if principal.user_id == user_id:
        user = get_user(user_id)
    else:
        user = get_scoped(User, user_id, organization_id=require_organization(principal))
    if user.role is None:
        return []
    return list(user.role.product_modules)
