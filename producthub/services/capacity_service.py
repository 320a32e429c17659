"""
Capacity Service — teams and quarterly capacity plans.

Team names are unique per product among active teams. Teams are never
hard-deleted; deactivating one keeps its historical EpicEffort rows.

A capacity plan is created on first read and seeded with one zero-effort
row per (roadmap epic × active team) of the same quarter.
"""

import logging

from sqlalchemy import select

from producthub.core.exceptions import ConflictError, ValidationError
from producthub.models import db
from producthub.models.capacity import CapacityPlan, EpicEffort, Team
from producthub.models.product import Product
from producthub.models.roadmap import QuarterlyRoadmap
from producthub.services.helpers.scoped_queries import get_scoped
from producthub.utils.helpers import commit_or_raise, parse_int

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
# Teams
# ═══════════════════════════════════════════════════════════════
def list_active_teams(product_id: int) -> list[Team]:
    stmt = (
        select(Team)
        .where(Team.product_id == product_id, Team.is_active.is_(True))
        .order_by(Team.name, Team.id)
    )
    return db.session.execute(stmt).scalars().all()


def _ensure_team_name_available(product_id: int, name: str, exclude_team_id=None) -> None:
    stmt = select(Team.id).where(
        Team.product_id == product_id,
        Team.is_active.is_(True),
        Team.name == name,
    )
    if exclude_team_id is not None:
        stmt = stmt.where(Team.id != exclude_team_id)
    if db.session.execute(stmt.limit(1)).first() is not None:
        raise ConflictError(resource="Team", field="name", value=name)


def _clean_team_payload(data: dict) -> tuple[str, bool | None]:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required", details={"name": "required"})
    is_active = data.get("is_active")
    if is_active is not None and not isinstance(is_active, bool):
        raise ValidationError("is_active must be a boolean", details={"is_active": "invalid"})
    return name.strip(), is_active


def create_team(product: Product, data: dict) -> Team:
    name, is_active = _clean_team_payload(data)
    active = True if is_active is None else is_active
    if active:
        _ensure_team_name_available(product.id, name)

    team = Team(
        product_id=product.id, name=name,
        description=data.get("description"), is_active=active,
    )
    db.session.add(team)
    commit_or_raise("Team", "name", name)
    logger.info("Team %d '%s' added to product %d", team.id, team.name, product.id)
    return team


def update_team(product: Product, team_id: int, data: dict) -> Team:
    team = get_scoped(Team, team_id, product_id=product.id)
    name, is_active = _clean_team_payload(data)
    active = team.is_active if is_active is None else is_active
    if active:
        _ensure_team_name_available(product.id, name, exclude_team_id=team.id)

    team.name = name
    team.description = data.get("description")
    team.is_active = active
    commit_or_raise("Team", "name", name)
    logger.info("Team %d updated for product %d", team.id, product.id)
    return team


def deactivate_team(product: Product, team_id: int) -> Team:
    team = get_scoped(Team, team_id, product_id=product.id)
    team.is_active = False
    db.session.commit()
    logger.info("Team %d deactivated for product %d", team.id, product.id)
    return team


# ═══════════════════════════════════════════════════════════════
# Capacity plans
# ═══════════════════════════════════════════════════════════════
def validate_period(year, quarter) -> tuple[int, int]:
    return (
        parse_int(year, "year", minimum=2000, maximum=2100),
        parse_int(quarter, "quarter", minimum=1, maximum=4),
    )


def find_plan(product_id: int, year: int, quarter: int) -> CapacityPlan | None:
    return db.session.execute(
        select(CapacityPlan).where(
            CapacityPlan.product_id == product_id,
            CapacityPlan.year == year,
            CapacityPlan.quarter == quarter,
        )
    ).scalar_one_or_none()


def _seed_efforts(plan: CapacityPlan, teams: list[Team]) -> int:
    roadmap = db.session.execute(
        select(QuarterlyRoadmap).where(
            QuarterlyRoadmap.product_id == plan.product_id,
            QuarterlyRoadmap.year == plan.year,
            QuarterlyRoadmap.quarter == plan.quarter,
        )
    ).scalar_one_or_none()
    if roadmap is None or not roadmap.items:
        logger.info(
            "No roadmap items for product %d Q%d %d; plan starts empty",
            plan.product_id, plan.quarter, plan.year,
        )
        return 0

    created = 0
    for item in roadmap.items:
        for team in teams:
            plan.efforts.append(EpicEffort(
                epic_id=item.epic_id, epic_name=item.epic_name,
                team_id=team.id, effort_days=0,
            ))
            created += 1
    return created


def get_or_create_plan(product: Product, year, quarter) -> tuple[CapacityPlan, list[Team]]:
    """Return the quarter's plan, creating and seeding it on first access."""
    year, quarter = validate_period(year, quarter)
    teams = list_active_teams(product.id)
    plan = find_plan(product.id, year, quarter)
    if plan is None:
        plan = CapacityPlan(product_id=product.id, year=year, quarter=quarter)
        db.session.add(plan)
        seeded = _seed_efforts(plan, teams)
        commit_or_raise("CapacityPlan", "quarter", f"Q{quarter} {year}")
        logger.info(
            "Capacity plan %d created for product %d Q%d %d with %d seeded effort(s)",
            plan.id, product.id, quarter, year, seeded,
        )
    return plan, teams


def save_plan(product: Product, year, quarter, data: dict) -> CapacityPlan:
    """Update the effort unit and upsert efforts keyed by (epic_id, team_id)."""
    year, quarter = validate_period(year, quarter)
    plan = find_plan(product.id, year, quarter)
    if plan is None:
        plan = CapacityPlan(product_id=product.id, year=year, quarter=quarter)
        db.session.add(plan)

    effort_unit = data.get("effort_unit")
    if effort_unit is not None:
        if not isinstance(effort_unit, str) or not effort_unit.strip() or len(effort_unit) > 20:
            raise ValidationError("effort_unit must be a short string", details={"effort_unit": "invalid"})
        plan.effort_unit = effort_unit.strip()

    raw_efforts = data.get("epic_efforts") or []
    if not isinstance(raw_efforts, list):
        raise ValidationError("epic_efforts must be a list", details={"epic_efforts": "invalid"})

    existing = {(e.epic_id, e.team_id): e for e in plan.efforts}
    for i, raw in enumerate(raw_efforts):
        if not isinstance(raw, dict):
            raise ValidationError(f"epic_efforts[{i}] must be an object")
        epic_id = raw.get("epic_id")
        if epic_id is None or str(epic_id).strip() == "":
            raise ValidationError(f"epic_efforts[{i}].epic_id is required", details={"epic_id": "required"})
        epic_id = str(epic_id).strip()
        team_id = parse_int(raw.get("team_id"), "team_id")
        get_scoped(Team, team_id, product_id=product.id)
        days = parse_int(raw.get("effort_days", 0), "effort_days", minimum=0)

        effort = existing.get((epic_id, team_id))
        if effort is None:
            effort = EpicEffort(epic_id=epic_id, team_id=team_id)
            plan.efforts.append(effort)
            existing[(epic_id, team_id)] = effort
        if raw.get("epic_name") is not None:
            effort.epic_name = raw["epic_name"]
        effort.effort_days = days
        effort.notes = raw.get("notes")

    commit_or_raise("EpicEffort", "epic_id")
    logger.info(
        "Capacity plan saved for product %d Q%d %d (%d effort row(s) in payload)",
        product.id, quarter, year, len(raw_efforts),
    )
    return plan
