"""
Quarterly roadmap models.

An epic may be planned into at most one quarter per product. RoadmapItem
carries a denormalised ``product_id`` so the database enforces that with
a unique (product_id, epic_id) constraint; services/roadmap_service.py
turns a violation into an epic conflict.
"""

from producthub.models import db
from producthub.models.base import TimestampMixin, iso


class QuarterlyRoadmap(TimestampMixin, db.Model):
    __tablename__ = "quarterly_roadmaps"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    year = db.Column(db.Integer, nullable=False)
    quarter = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "year", "quarter", name="uq_roadmap_product_quarter"),
        db.CheckConstraint("quarter BETWEEN 1 AND 4", name="ck_roadmap_quarter"),
    )

    product = db.relationship("Product", back_populates="roadmaps")
    items = db.relationship(
        "RoadmapItem", back_populates="roadmap", cascade="all, delete-orphan",
        order_by="RoadmapItem.position",
    )

    @property
    def label(self):
        return f"Q{self.quarter} {self.year}"

    def to_dict(self, items=None):
        """Serialise the roadmap; ``items`` lets callers pass display-ready item dicts."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "year": self.year,
            "quarter": self.quarter,
            "roadmap_items": items if items is not None else [i.to_dict() for i in self.items],
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


class RoadmapItem(db.Model):
    __tablename__ = "roadmap_items"

    id = db.Column(db.Integer, primary_key=True)
    roadmap_id = db.Column(
        db.Integer, db.ForeignKey("quarterly_roadmaps.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False,
    )
    epic_id = db.Column(db.String(100), nullable=False)
    epic_name = db.Column(db.String(300))
    epic_description = db.Column(db.Text)
    priority = db.Column(db.String(20))
    status = db.Column(db.String(30))
    estimated_effort = db.Column(db.String(50))
    assigned_team = db.Column(db.String(200))
    # RICE inputs are stored as provided, not computed here
    reach = db.Column(db.Integer)
    impact = db.Column(db.Float)
    confidence = db.Column(db.Float)
    rice_score = db.Column(db.Float)
    effort_rating = db.Column(db.Integer)
    initiative_name = db.Column(db.String(200))
    theme_name = db.Column(db.String(200))
    theme_color = db.Column(db.String(20))
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    position = db.Column(db.Integer, default=0, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "epic_id", name="uq_roadmap_item_product_epic"),
    )

    roadmap = db.relationship("QuarterlyRoadmap", back_populates="items")

    def to_dict(self):
        return {
            "epic_id": self.epic_id,
            "epic_name": self.epic_name,
            "epic_description": self.epic_description,
            "priority": self.priority,
            "status": self.status,
            "estimated_effort": self.estimated_effort,
            "assigned_team": self.assigned_team,
            "reach": self.reach,
            "impact": self.impact,
            "confidence": self.confidence,
            "rice_score": self.rice_score,
            "effort_rating": self.effort_rating,
            "initiative_name": self.initiative_name,
            "theme_name": self.theme_name,
            "theme_color": self.theme_color,
            "start_date": iso(self.start_date),
            "end_date": iso(self.end_date),
        }
