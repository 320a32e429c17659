"""
Auth Models — organizations, users, roles.

Organizations are the tenant boundary. A role records the organization
that created it, but an organization "sees" a role in listings only while
at least one of its users holds it (see services/tenant_scope.py).
"""

from producthub.models import db
from producthub.models.base import TimestampMixin, iso


# ═══════════════════════════════════════════════════════════════
# Junction: role ↔ product_module
# ═══════════════════════════════════════════════════════════════
role_product_modules = db.Table(
    "role_product_modules",
    db.Column(
        "role_id", db.Integer,
        db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True,
    ),
    db.Column(
        "product_module_id", db.Integer,
        db.ForeignKey("product_modules.id", ondelete="CASCADE"), primary_key=True,
    ),
)


# ═══════════════════════════════════════════════════════════════
# 1. ORGANIZATIONS
# ═══════════════════════════════════════════════════════════════
class Organization(TimestampMixin, db.Model):
    __tablename__ = "organizations"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)

    # Deleting an organization deletes its users; products are detached
    # (organization_id → NULL) rather than deleted.
    users = db.relationship(
        "User", back_populates="organization", lazy="dynamic",
        cascade="all, delete-orphan",
    )
    products = db.relationship("Product", back_populates="organization", lazy="dynamic")

    def to_dict(self, include_counts=False):
        d = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
        if include_counts:
            d["user_count"] = self.users.count()
            d["product_count"] = self.products.count()
        return d


# ═══════════════════════════════════════════════════════════════
# 2. USERS
# ═══════════════════════════════════════════════════════════════
class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(200), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    # NULL only for bootstrap accounts created outside any organization
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    is_superadmin = db.Column(db.Boolean, default=False, nullable=False)
    is_global_superadmin = db.Column(db.Boolean, default=False, nullable=False)
    role_id = db.Column(
        db.Integer, db.ForeignKey("roles.id", ondelete="SET NULL"), nullable=True, index=True,
    )

    organization = db.relationship("Organization", back_populates="users")
    role = db.relationship("Role", back_populates="users")
    products = db.relationship("Product", back_populates="owner", lazy="dynamic")

    def to_dict(self, include_role=True):
        d = {
            "id": self.id,
            "email": self.email,
            "organization_id": self.organization_id,
            "is_superadmin": bool(self.is_superadmin),
            "is_global_superadmin": bool(self.is_global_superadmin),
            "role_id": self.role_id,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
        if include_role:
            d["role"] = self.role.to_dict() if self.role else None
        return d


# ═══════════════════════════════════════════════════════════════
# 3. ROLES
# ═══════════════════════════════════════════════════════════════
class Role(TimestampMixin, db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    # creating organization; NULL on rows created before it was recorded
    organization_id = db.Column(
        db.Integer, db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )

    users = db.relationship("User", back_populates="role")
    product_modules = db.relationship(
        "ProductModule", secondary=role_product_modules, back_populates="roles",
        order_by="ProductModule.id",
    )

    def to_dict(self, include_modules=True):
        d = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "organization_id": self.organization_id,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
        if include_modules:
            d["product_modules"] = [pm.to_dict() for pm in self.product_modules]
        return d
