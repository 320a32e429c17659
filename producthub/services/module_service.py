"""
Module Service — global module catalog.
"""

import logging

from sqlalchemy import select

from producthub.models import db
from producthub.models.product import DEFAULT_MODULES, Module

logger = logging.getLogger(__name__)


def list_active_modules() -> list[Module]:
    stmt = (
        select(Module)
        .where(Module.is_active.is_(True))
        .order_by(Module.display_order, Module.id)
    )
    return db.session.execute(stmt).scalars().all()


def seed_default_modules() -> int:
    """Insert missing catalog modules. Idempotent; caller commits.

    Returns the number of modules created.
    """
    existing = set(db.session.execute(select(Module.name)).scalars().all())
    created = 0
    for name, description, icon, order in DEFAULT_MODULES:
        if name in existing:
            continue
        db.session.add(Module(
            name=name, description=description, icon=icon,
            is_active=True, display_order=order,
        ))
        created += 1
    logger.info("Seeded %d module(s)", created)
    return created
