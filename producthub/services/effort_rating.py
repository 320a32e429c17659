"""
Effort star ratings derived from capacity planning.

    star_rating(total, (s1, s2, s3, s4))
        total ≤ s1 → 1, ≤ s2 → 2, ≤ s3 → 3, ≤ s4 → 4, otherwise 5

computed_ratings() sums EpicEffort.effort_days per epic across every team
of the (product, year, quarter) capacity plan and rates each epic whose
total is positive. Roadmap display uses these values in place of the
manually stored rating.
"""

import logging
from collections import defaultdict

from sqlalchemy import select

from producthub.core.exceptions import ValidationError
from producthub.models import db
from producthub.models.capacity import (
    DEFAULT_EFFORT_UNIT,
    CapacityPlan,
    EffortRatingConfig,
    EpicEffort,
)
from producthub.models.product import Product
from producthub.utils.helpers import parse_int

logger = logging.getLogger(__name__)

THRESHOLD_FIELDS = ("star1_max", "star2_max", "star3_max", "star4_max")


def star_rating(total_effort, thresholds) -> int:
    s1, s2, s3, s4 = thresholds
    if total_effort <= s1:
        return 1
    if total_effort <= s2:
        return 2
    if total_effort <= s3:
        return 3
    if total_effort <= s4:
        return 4
    return 5


def list_configs(product_id: int) -> list[EffortRatingConfig]:
    stmt = (
        select(EffortRatingConfig)
        .where(EffortRatingConfig.product_id == product_id)
        .order_by(EffortRatingConfig.id)
    )
    return db.session.execute(stmt).scalars().all()


def select_config(configs, effort_unit):
    """Config matching the plan's unit, else the first one, else None."""
    for config in configs:
        if config.unit_type == effort_unit:
            return config
    return configs[0] if configs else None


def computed_ratings(product_id: int, year: int, quarter: int) -> dict[str, int]:
    """epic_id → star rating, for epics with positive planned effort."""
    plan = db.session.execute(
        select(CapacityPlan).where(
            CapacityPlan.product_id == product_id,
            CapacityPlan.year == year,
            CapacityPlan.quarter == quarter,
        )
    ).scalar_one_or_none()
    if plan is None:
        return {}

    config = select_config(list_configs(product_id), plan.effort_unit)
    if config is None:
        return {}

    totals: dict[str, int] = defaultdict(int)
    efforts = db.session.execute(
        select(EpicEffort).where(EpicEffort.capacity_plan_id == plan.id)
    ).scalars()
    for effort in efforts:
        totals[effort.epic_id] += effort.effort_days or 0

    return {
        epic_id: star_rating(total, config.thresholds)
        for epic_id, total in totals.items()
        if total > 0
    }


def save_config(product: Product, data: dict) -> EffortRatingConfig:
    """Create or replace the thresholds for one unit type.

    Thresholds must be non-negative and non-decreasing.
    """
    unit_type = data.get("unit_type") or DEFAULT_EFFORT_UNIT
    if not isinstance(unit_type, str) or len(unit_type) > 20:
        raise ValidationError("unit_type must be a short string", details={"unit_type": "invalid"})

    values = [parse_int(data.get(f), f, minimum=0) for f in THRESHOLD_FIELDS]
    if values != sorted(values):
        raise ValidationError(
            "Thresholds must be non-decreasing (star1_max ≤ star2_max ≤ star3_max ≤ star4_max)",
            details=dict(zip(THRESHOLD_FIELDS, values)),
        )

    config = db.session.execute(
        select(EffortRatingConfig).where(
            EffortRatingConfig.product_id == product.id,
            EffortRatingConfig.unit_type == unit_type,
        )
    ).scalar_one_or_none()
    if config is None:
        config = EffortRatingConfig(product_id=product.id, unit_type=unit_type)
        db.session.add(config)
    for field, value in zip(THRESHOLD_FIELDS, values):
        setattr(config, field, value)

    db.session.commit()
    logger.info("Effort rating config '%s' saved for product %d: %s", unit_type, product.id, values)
    return config
