"""
Backlog Service — product backlog epics and hypothesis canvas.

Saving a backlog replaces its epic list wholesale; epic ids must be
unique within the payload.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import ValidationError
from producthub.models import db
from producthub.models.backlog import EPIC_STATUSES, BacklogEpic, ProductBacklog, ProductHypothesis
from producthub.models.product import Product

logger = logging.getLogger(__name__)

HYPOTHESIS_FIELDS = (
    "hypothesis_statement",
    "success_metrics",
    "assumptions",
    "initiatives",
    "themes",
)


# ═══════════════════════════════════════════════════════════════
# Backlog
# ═══════════════════════════════════════════════════════════════
def get_backlog(product: Product) -> dict:
    """Backlog payload; a product without a saved backlog has no epics."""
    if product.backlog is None:
        return {"id": None, "product_id": product.id, "epics": []}
    return product.backlog.to_dict()


def _parse_epic(raw, position: int) -> dict:
    if not isinstance(raw, dict):
        raise ValidationError(f"epics[{position}] must be an object")
    epic_id = raw.get("epic_id")
    if epic_id is None or str(epic_id).strip() == "":
        raise ValidationError(f"epics[{position}].epic_id is required", details={"epic_id": "required"})
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"epics[{position}].name is required", details={"name": "required"})
    status = raw.get("status") or "new"
    if status not in EPIC_STATUSES:
        raise ValidationError(
            f"epics[{position}].status must be one of {sorted(EPIC_STATUSES)}",
            details={"status": "invalid"},
        )
    return {
        "epic_id": str(epic_id).strip(),
        "name": name.strip(),
        "description": raw.get("description"),
        "theme_name": raw.get("theme_name"),
        "theme_color": raw.get("theme_color"),
        "initiative_name": raw.get("initiative_name"),
        "priority": raw.get("priority"),
        "status": status,
        "position": position,
    }


def save_backlog(product: Product, data: dict) -> ProductBacklog:
    raw_epics = data.get("epics")
    if not isinstance(raw_epics, list):
        raise ValidationError("epics must be a list", details={"epics": "invalid"})

    parsed = [_parse_epic(raw, i) for i, raw in enumerate(raw_epics)]
    seen = set()
    for epic in parsed:
        if epic["epic_id"] in seen:
            raise ValidationError(
                f"Duplicate epic_id '{epic['epic_id']}' in backlog",
                details={"epic_id": epic["epic_id"]},
            )
        seen.add(epic["epic_id"])

    backlog = product.backlog
    if backlog is None:
        backlog = ProductBacklog(product=product)
        db.session.add(backlog)
    else:
        backlog.epics.clear()
        db.session.flush()

    for epic in parsed:
        backlog.epics.append(BacklogEpic(product_id=product.id, **epic))

    db.session.commit()
    logger.info("Backlog saved for product %d with %d epic(s)", product.id, len(parsed))
    return backlog


def backlog_epics_by_id(product_id: int, epic_ids) -> dict[str, BacklogEpic]:
    """Backlog epics of a product keyed by epic_id, limited to ``epic_ids``."""
    epic_ids = list(epic_ids)
    if not epic_ids:
        return {}
    stmt = select(BacklogEpic).where(
        BacklogEpic.product_id == product_id, BacklogEpic.epic_id.in_(epic_ids),
    )
    return {e.epic_id: e for e in db.session.execute(stmt).scalars()}


# ═══════════════════════════════════════════════════════════════
# Hypothesis
# ═══════════════════════════════════════════════════════════════
def get_hypothesis(product: Product) -> dict:
    if product.hypothesis is None:
        empty = {field: None for field in HYPOTHESIS_FIELDS}
        return {"id": None, "product_id": product.id, **empty}
    return product.hypothesis.to_dict()


def save_hypothesis(product: Product, data: dict) -> ProductHypothesis:
    """Full-replace save of the hypothesis canvas."""
    for field in HYPOTHESIS_FIELDS:
        value = data.get(field)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be a string", details={field: "invalid"})

    hypothesis = product.hypothesis
    if hypothesis is None:
        hypothesis = ProductHypothesis(product=product)
        db.session.add(hypothesis)
    for field in HYPOTHESIS_FIELDS:
        setattr(hypothesis, field, data.get(field))

    db.session.commit()
    logger.info("Hypothesis saved for product %d", product.id)
    return hypothesis
