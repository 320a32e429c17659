"""
Capacity planning models.

Models:
    - Team: per-product delivery team, soft-deleted via is_active
    - CapacityPlan: (product, year, quarter) effort grid header
    - EpicEffort: effort days one team spends on one epic in a plan
    - EffortRatingConfig: thresholds mapping summed effort to 1–5 stars
"""

from producthub.models import db
from producthub.models.base import TimestampMixin, iso

DEFAULT_EFFORT_UNIT = "days"


class Team(TimestampMixin, db.Model):
    __tablename__ = "teams"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    product = db.relationship("Product", back_populates="teams")

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.name,
            "description": self.description,
            "is_active": bool(self.is_active),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


class CapacityPlan(TimestampMixin, db.Model):
    __tablename__ = "capacity_plans"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year = db.Column(db.Integer, nullable=False)
    quarter = db.Column(db.Integer, nullable=False)
    effort_unit = db.Column(db.String(20), default=DEFAULT_EFFORT_UNIT, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "year", "quarter", name="uq_capacity_plan_quarter"),
    )

    product = db.relationship("Product", back_populates="capacity_plans")
    efforts = db.relationship(
        "EpicEffort", back_populates="capacity_plan", cascade="all, delete-orphan",
        order_by="EpicEffort.id",
    )

    def to_dict(self, teams=None):
        d = {
            "id": self.id,
            "product_id": self.product_id,
            "year": self.year,
            "quarter": self.quarter,
            "effort_unit": self.effort_unit,
            "epic_efforts": [
                e.to_dict()
                for e in sorted(self.efforts, key=lambda e: (e.epic_name or "", e.team_id))
            ],
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
        if teams is not None:
            d["teams"] = [t.to_dict() for t in teams]
        return d


class EpicEffort(TimestampMixin, db.Model):
    __tablename__ = "epic_efforts"

    id = db.Column(db.Integer, primary_key=True)
    capacity_plan_id = db.Column(
        db.Integer, db.ForeignKey("capacity_plans.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    epic_id = db.Column(db.String(100), nullable=False)
    epic_name = db.Column(db.String(300))
    team_id = db.Column(
        db.Integer, db.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False,
    )
    effort_days = db.Column(db.Integer, default=0, nullable=False)
    notes = db.Column(db.Text)

    __table_args__ = (
        db.UniqueConstraint(
            "capacity_plan_id", "epic_id", "team_id", name="uq_epic_effort_plan_epic_team",
        ),
    )

    capacity_plan = db.relationship("CapacityPlan", back_populates="efforts")
    team = db.relationship("Team")

    def to_dict(self):
        return {
            "id": self.id,
            "epic_id": self.epic_id,
            "epic_name": self.epic_name,
            "team_id": self.team_id,
            "team_name": self.team.name if self.team else None,
            "effort_days": self.effort_days,
            "notes": self.notes,
        }


class EffortRatingConfig(TimestampMixin, db.Model):
    """Upper bounds (inclusive) for 1–4 stars; anything above star4_max is 5 stars."""

    __tablename__ = "effort_rating_configs"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    unit_type = db.Column(db.String(20), default=DEFAULT_EFFORT_UNIT, nullable=False)
    star1_max = db.Column(db.Integer, nullable=False)
    star2_max = db.Column(db.Integer, nullable=False)
    star3_max = db.Column(db.Integer, nullable=False)
    star4_max = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "unit_type", name="uq_effort_rating_unit"),
    )

    product = db.relationship("Product", back_populates="effort_rating_configs")

    @property
    def thresholds(self):
        return (self.star1_max, self.star2_max, self.star3_max, self.star4_max)

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "unit_type": self.unit_type,
            "star1_max": self.star1_max,
            "star2_max": self.star2_max,
            "star3_max": self.star3_max,
            "star4_max": self.star4_max,
        }
