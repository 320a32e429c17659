"""
Backlog & hypothesis models.

Models:
    - ProductBacklog: one per product, container for epics
    - BacklogEpic: structured epic row (theme / initiative metadata)
    - ProductHypothesis: one per product, free-text hypothesis canvas
"""

from producthub.models import db
from producthub.models.base import TimestampMixin, iso

EPIC_STATUSES = {"new", "in_progress", "done", "blocked", "cancelled"}


class ProductBacklog(TimestampMixin, db.Model):
    __tablename__ = "product_backlogs"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"),
        unique=True, nullable=False,
    )

    product = db.relationship("Product", back_populates="backlog")
    epics = db.relationship(
        "BacklogEpic", back_populates="backlog", cascade="all, delete-orphan",
        order_by="BacklogEpic.position",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "epics": [e.to_dict() for e in self.epics],
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


class BacklogEpic(db.Model):
    """
    One epic in a product backlog.

    ``epic_id`` is the client-supplied opaque identifier that roadmap and
    capacity rows refer to; it is unique within a product.
    """

    __tablename__ = "backlog_epics"

    id = db.Column(db.Integer, primary_key=True)
    backlog_id = db.Column(
        db.Integer, db.ForeignKey("product_backlogs.id", ondelete="CASCADE"), nullable=False,
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    epic_id = db.Column(db.String(100), nullable=False)
    name = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text)
    theme_name = db.Column(db.String(200))
    theme_color = db.Column(db.String(20))
    initiative_name = db.Column(db.String(200))
    priority = db.Column(db.String(20))
    status = db.Column(db.String(30), default="new")
    position = db.Column(db.Integer, default=0, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "epic_id", name="uq_backlog_epic_product"),
    )

    backlog = db.relationship("ProductBacklog", back_populates="epics")

    def to_dict(self):
        return {
            "epic_id": self.epic_id,
            "name": self.name,
            "description": self.description,
            "theme_name": self.theme_name,
            "theme_color": self.theme_color,
            "initiative_name": self.initiative_name,
            "priority": self.priority,
            "status": self.status,
            "position": self.position,
        }


class ProductHypothesis(TimestampMixin, db.Model):
    __tablename__ = "product_hypotheses"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"),
        unique=True, nullable=False,
    )
    hypothesis_statement = db.Column(db.Text)
    success_metrics = db.Column(db.Text)
    assumptions = db.Column(db.Text)
    initiatives = db.Column(db.Text)
    themes = db.Column(db.Text)

    product = db.relationship("Product", back_populates="hypothesis")

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "hypothesis_statement": self.hypothesis_statement,
            "success_metrics": self.success_metrics,
            "assumptions": self.assumptions,
            "initiatives": self.initiatives,
            "themes": self.themes,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
