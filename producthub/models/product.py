"""
Product domain models — module catalog, products, per-product module toggles.

Models:
    - Module: global catalog of capability types (Backlog, Roadmap, ...)
    - Product: owned by a user within an organization
    - ProductModule: "this product has this module turned on"
"""

from producthub.models import db
from producthub.models.auth import role_product_modules
from producthub.models.base import TimestampMixin, iso, utcnow

# Seeded by ``flask seed-modules``: (name, description, icon, display_order)
DEFAULT_MODULES = (
    ("Product Backlog", "Epics, themes and initiatives for the product", "list", 1),
    ("Product Hypothesis", "Hypothesis statement, success metrics and assumptions", "lightbulb", 2),
    ("Quarterly Roadmap", "Plan epics into quarters with RICE scoring", "map", 3),
    ("Capacity Planning", "Team effort per epic and effort star ratings", "users", 4),
)


class Module(db.Model):
    """Capability type in the global (non tenant-scoped) catalog."""

    __tablename__ = "modules"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    icon = db.Column(db.String(50))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "is_active": bool(self.is_active),
            "display_order": self.display_order,
            "created_at": iso(self.created_at),
        }


class Product(TimestampMixin, db.Model):
    """
    A product owned by one user inside one organization.

    Both FKs are SET NULL: deleting the owner or the organization leaves
    the product orphaned instead of deleting it.
    """

    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )

    owner = db.relationship("User", back_populates="products")
    organization = db.relationship("Organization", back_populates="products")
    product_modules = db.relationship(
        "ProductModule", back_populates="product", cascade="all, delete-orphan",
        order_by="ProductModule.id",
    )
    backlog = db.relationship(
        "ProductBacklog", back_populates="product", uselist=False, cascade="all, delete-orphan",
    )
    hypothesis = db.relationship(
        "ProductHypothesis", back_populates="product", uselist=False,
        cascade="all, delete-orphan",
    )
    roadmaps = db.relationship(
        "QuarterlyRoadmap", back_populates="product", cascade="all, delete-orphan",
    )
    teams = db.relationship("Team", back_populates="product", cascade="all, delete-orphan")
    capacity_plans = db.relationship(
        "CapacityPlan", back_populates="product", cascade="all, delete-orphan",
    )
    effort_rating_configs = db.relationship(
        "EffortRatingConfig", back_populates="product", cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "user_id": self.user_id,
            "organization_id": self.organization_id,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


class ProductModule(TimestampMixin, db.Model):
    __tablename__ = "product_modules"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    module_id = db.Column(
        db.Integer, db.ForeignKey("modules.id", ondelete="CASCADE"), nullable=False,
    )
    is_enabled = db.Column(db.Boolean, default=True, nullable=False)
    completion_percentage = db.Column(db.Integer, default=0, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("product_id", "module_id", name="uq_product_module"),
    )

    product = db.relationship("Product", back_populates="product_modules")
    module = db.relationship("Module")
    roles = db.relationship(
        "Role", secondary=role_product_modules, back_populates="product_modules",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product.name if self.product else None,
            "module_id": self.module_id,
            "module": self.module.to_dict() if self.module else None,
            "is_enabled": bool(self.is_enabled),
            "completion_percentage": self.completion_percentage,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
