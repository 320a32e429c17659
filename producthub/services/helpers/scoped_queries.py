"""
Scope-aware query helpers.

Every get-by-id on tenant data SHOULD use these helpers instead of
db.session.get(Model, pk). A bare .get() ignores the organization or
product boundary the caller is acting within.

Usage:
    # Scope by organization_id (users, products)
    user = get_scoped(User, user_id, organization_id=principal.organization_id)

    # Scope by product_id (teams, roadmaps, capacity plans)
    team = get_scoped(Team, team_id, product_id=product.id)

Scope field resolution:
    Each keyword argument maps directly to a column name on the model.
    If the model does not have that column, a ValueError is raised at
    call time so the bug surfaces during development rather than silently
    allowing an unscoped lookup.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import NotFoundError
from producthub.models import db

logger = logging.getLogger(__name__)


def get_scoped(
    model,
    pk: int,
    *,
    organization_id: int | None = None,
    product_id: int | None = None,
):
    """Fetch a single entity by PK with mandatory scope filter.

    Out-of-scope rows are indistinguishable from missing ones: both raise
    NotFoundError → HTTP 404.

    Args:
        model: SQLAlchemy model class with an `id` PK column.
        pk: Primary key value to look up.
        organization_id: Scope by organization_id column.
        product_id: Scope by product_id column.

    Raises:
        ValueError: If no scope parameter is provided, or a provided scope
                    names a column the model does not have.
        NotFoundError: If the entity does not exist OR is out of scope.
    """
    provided_scopes: dict[str, int] = {
        "organization_id": organization_id,
        "product_id": product_id,
    }
    provided_scopes = {k: v for k, v in provided_scopes.items() if v is not None}

    if not provided_scopes:
        raise ValueError(
            f"{model.__name__} id={pk} requires at least one scope filter "
            "(organization_id or product_id). "
            "Unscoped lookups are forbidden."
        )

    missing_fields = sorted(f for f in provided_scopes if not hasattr(model, f))
    if missing_fields:
        raise ValueError(
            f"{model.__name__} id={pk}: scope field(s) {missing_fields} "
            f"do not exist as columns on {model.__name__}. "
            "Refusing to perform a partially scoped lookup."
        )

    stmt = select(model).where(model.id == pk)
    for field, value in provided_scopes.items():
        stmt = stmt.where(getattr(model, field) == value)

    result = db.session.execute(stmt).scalar_one_or_none()

    if result is None:
        logger.debug(
            "get_scoped: %s id=%s not found in scope %s",
            model.__name__,
            pk,
            provided_scopes,
        )
        raise NotFoundError(resource=model.__name__, resource_id=pk)

    return result

