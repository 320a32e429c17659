"""
Roadmap Service — quarterly roadmaps, epic conflict detection, display ratings.

Save rules:
  * Every epic_id in the payload must be unique within the payload.
  * An epic already planned in another quarter of the same product
    rejects the whole save with EpicConflictError; nothing is written.
  * Items are replaced (delete, flush, re-insert) inside one commit.
    The unique (product_id, epic_id) constraint on roadmap_items closes
    the window between the conflict scan and the commit: a concurrent
    writer's IntegrityError is reported as the same conflict.

Display rules (see roadmap_items_for_display):
  * effort_rating comes from capacity planning whenever the epic has
    positive planned effort, otherwise from the stored value.
  * theme / initiative metadata comes from the item when stored, else
    from the product's backlog epic with the same epic_id.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from producthub.core.exceptions import (
    ConflictError,
    EpicConflictError,
    NotFoundError,
    ValidationError,
)
from producthub.models import db
from producthub.models.product import Product
from producthub.models.roadmap import QuarterlyRoadmap, RoadmapItem
from producthub.services.backlog_service import backlog_epics_by_id
from producthub.services.capacity_service import validate_period
from producthub.services.effort_rating import computed_ratings
from producthub.utils.helpers import parse_date, parse_int

logger = logging.getLogger(__name__)

_TEXT_FIELDS = (
    "epic_name", "epic_description", "priority", "status", "estimated_effort",
    "assigned_team", "initiative_name", "theme_name", "theme_color",
)
_FLOAT_FIELDS = ("impact", "confidence", "rice_score")


# ═══════════════════════════════════════════════════════════════
# Queries
# ═══════════════════════════════════════════════════════════════
def find_roadmap(product_id: int, year: int, quarter: int) -> QuarterlyRoadmap | None:
    return db.session.execute(
        select(QuarterlyRoadmap).where(
            QuarterlyRoadmap.product_id == product_id,
            QuarterlyRoadmap.year == year,
            QuarterlyRoadmap.quarter == quarter,
        )
    ).scalar_one_or_none()


def get_roadmap(product: Product, year, quarter) -> QuarterlyRoadmap:
    year, quarter = validate_period(year, quarter)
    roadmap = find_roadmap(product.id, year, quarter)
    if roadmap is None:
        raise NotFoundError(resource="QuarterlyRoadmap", resource_id=f"Q{quarter} {year}")
    return roadmap


def list_roadmaps(product: Product) -> list[QuarterlyRoadmap]:
    stmt = (
        select(QuarterlyRoadmap)
        .where(QuarterlyRoadmap.product_id == product.id)
        .order_by(QuarterlyRoadmap.year, QuarterlyRoadmap.quarter)
    )
    return db.session.execute(stmt).scalars().all()


def list_years(product: Product) -> list[int]:
    stmt = (
        select(QuarterlyRoadmap.year)
        .where(QuarterlyRoadmap.product_id == product.id)
        .distinct()
        .order_by(QuarterlyRoadmap.year)
    )
    return db.session.execute(stmt).scalars().all()


def list_quarters(product: Product, year) -> list[int]:
    year = parse_int(year, "year")
    stmt = (
        select(QuarterlyRoadmap.quarter)
        .where(QuarterlyRoadmap.product_id == product.id, QuarterlyRoadmap.year == year)
        .distinct()
        .order_by(QuarterlyRoadmap.quarter)
    )
    return db.session.execute(stmt).scalars().all()


def assigned_epic_ids(product: Product, exclude_year=None, exclude_quarter=None) -> list[str]:
    """Epic ids planned in any quarter, optionally ignoring one quarter."""
    stmt = (
        select(RoadmapItem.epic_id)
        .join(QuarterlyRoadmap, RoadmapItem.roadmap_id == QuarterlyRoadmap.id)
        .where(QuarterlyRoadmap.product_id == product.id)
    )
    if exclude_year is not None and exclude_quarter is not None:
        year, quarter = validate_period(exclude_year, exclude_quarter)
        stmt = stmt.where(
            ~((QuarterlyRoadmap.year == year) & (QuarterlyRoadmap.quarter == quarter))
        )
    return sorted(set(db.session.execute(stmt).scalars().all()))


# ═══════════════════════════════════════════════════════════════
# Conflict detection
# ═══════════════════════════════════════════════════════════════
def find_epic_conflicts(product_id: int, year: int, quarter: int, epic_ids) -> list[dict]:
    """Epics from ``epic_ids`` already planned in another quarter of the product."""
    epic_ids = list(epic_ids)
    if not epic_ids:
        return []
    stmt = (
        select(RoadmapItem, QuarterlyRoadmap)
        .join(QuarterlyRoadmap, RoadmapItem.roadmap_id == QuarterlyRoadmap.id)
        .where(
            QuarterlyRoadmap.product_id == product_id,
            RoadmapItem.epic_id.in_(epic_ids),
            ~((QuarterlyRoadmap.year == year) & (QuarterlyRoadmap.quarter == quarter)),
        )
        .order_by(QuarterlyRoadmap.year, QuarterlyRoadmap.quarter, RoadmapItem.position)
    )
    conflicts = []
    for item, roadmap in db.session.execute(stmt).all():
        name = item.epic_name or item.epic_id
        conflicts.append({
            "epic_id": item.epic_id,
            "epic_name": name,
            "year": roadmap.year,
            "quarter": roadmap.quarter,
            "label": f"{name} (Q{roadmap.quarter} {roadmap.year})",
        })
    return conflicts


# ═══════════════════════════════════════════════════════════════
# Save
# ═══════════════════════════════════════════════════════════════
def _parse_item(raw, position: int) -> dict:
    if not isinstance(raw, dict):
        raise ValidationError(f"roadmap_items[{position}] must be an object")
    epic_id = raw.get("epic_id")
    if epic_id is None or str(epic_id).strip() == "":
        raise ValidationError(
            f"roadmap_items[{position}].epic_id is required", details={"epic_id": "required"},
        )

    parsed = {"epic_id": str(epic_id).strip(), "position": position}
    for field in _TEXT_FIELDS:
        value = raw.get(field)
        parsed[field] = None if value is None else str(value)
    for field in _FLOAT_FIELDS:
        value = raw.get(field)
        if value is None or value == "":
            parsed[field] = None
            continue
        try:
            parsed[field] = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field} must be a number", details={field: "invalid"})
    parsed["reach"] = parse_int(raw.get("reach"), "reach", minimum=0, required=False)
    parsed["effort_rating"] = parse_int(
        raw.get("effort_rating"), "effort_rating", minimum=0, maximum=5, required=False,
    )
    parsed["start_date"] = parse_date(raw.get("start_date"))
    parsed["end_date"] = parse_date(raw.get("end_date"))
    if parsed["start_date"] and parsed["end_date"] and parsed["end_date"] < parsed["start_date"]:
        raise ValidationError("end_date must not be before start_date", details={"end_date": "invalid"})
    return parsed


def parse_items(raw_items) -> list[dict]:
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise ValidationError("roadmap_items must be a list", details={"roadmap_items": "invalid"})
    items = [_parse_item(raw, i) for i, raw in enumerate(raw_items)]
    seen = set()
    for item in items:
        if item["epic_id"] in seen:
            raise ValidationError(
                f"Epic '{item['epic_id']}' appears more than once in this roadmap",
                details={"epic_id": item["epic_id"]},
            )
        seen.add(item["epic_id"])
    return items


def save_roadmap(product: Product, year, quarter, raw_items) -> QuarterlyRoadmap:
    """Replace the items of the (product, year, quarter) roadmap atomically."""
    year, quarter = validate_period(year, quarter)
    items = parse_items(raw_items)
    epic_ids = [i["epic_id"] for i in items]

    conflicts = find_epic_conflicts(product.id, year, quarter, epic_ids)
    if conflicts:
        logger.warning(
            "Roadmap save rejected for product %d Q%d %d: %d conflicting epic(s)",
            product.id, quarter, year, len(conflicts),
        )
        raise EpicConflictError(conflicts)

    roadmap = find_roadmap(product.id, year, quarter)
    try:
        if roadmap is None:
            roadmap = QuarterlyRoadmap(product_id=product.id, year=year, quarter=quarter)
            db.session.add(roadmap)
        else:
            roadmap.items.clear()
            db.session.flush()

        for item in items:
            roadmap.items.append(RoadmapItem(product_id=product.id, **item))
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        conflicts = find_epic_conflicts(product.id, year, quarter, epic_ids)
        logger.warning(
            "Roadmap save for product %d Q%d %d lost a concurrent write race",
            product.id, quarter, year,
        )
        if not conflicts:
            raise ConflictError(
                resource="QuarterlyRoadmap", field="quarter", value=f"Q{quarter} {year}",
            ) from exc
        raise EpicConflictError(conflicts) from exc

    logger.info(
        "Roadmap %d saved for product %d Q%d %d with %d item(s)",
        roadmap.id, product.id, quarter, year, len(items),
    )
    return roadmap


def delete_roadmap(product: Product, year, quarter) -> None:
    roadmap = get_roadmap(product, year, quarter)
    label = roadmap.label
    db.session.delete(roadmap)
    db.session.commit()
    logger.info("Roadmap %s deleted for product %d", label, product.id)


def update_effort_rating(product: Product, year, quarter, epic_id: str, data: dict) -> RoadmapItem:
    """Set the manually stored rating (1–5, or null to clear) of one roadmap epic."""
    roadmap = get_roadmap(product, year, quarter)
    rating = parse_int(data.get("effort_rating"), "effort_rating", minimum=1, maximum=5, required=False)
    for item in roadmap.items:
        if item.epic_id == epic_id:
            item.effort_rating = rating
            db.session.commit()
            logger.info(
                "Effort rating of epic %s set to %s on product %d Q%d %d",
                epic_id, rating, product.id, roadmap.quarter, roadmap.year,
            )
            return item
    raise NotFoundError(resource="RoadmapItem", resource_id=epic_id)


# ═══════════════════════════════════════════════════════════════
# Display
# ═══════════════════════════════════════════════════════════════
def roadmap_items_for_display(roadmap: QuarterlyRoadmap) -> list[dict]:
    ratings = computed_ratings(roadmap.product_id, roadmap.year, roadmap.quarter)

    needs_backlog = [
        i.epic_id for i in roadmap.items if not (i.initiative_name and i.theme_name)
    ]
    backlog_epics = backlog_epics_by_id(roadmap.product_id, needs_backlog)

    result = []
    for item in roadmap.items:
        d = item.to_dict()
        computed = ratings.get(item.epic_id)
        d["effort_rating_source"] = "manual"
        if computed:
            d["effort_rating"] = computed
            d["effort_rating_source"] = "capacity"

        epic = backlog_epics.get(item.epic_id)
        if epic is not None:
            d["initiative_name"] = epic.initiative_name
            d["theme_name"] = epic.theme_name
            d["theme_color"] = epic.theme_color
        result.append(d)
    return result


def roadmap_to_dict(roadmap: QuarterlyRoadmap) -> dict:
    return roadmap.to_dict(items=roadmap_items_for_display(roadmap))
