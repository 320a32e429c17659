"""initial_product_hub_schema

Creates the Product Hub tables:
  - organizations, roles, users            — tenants and identities
  - modules, products, product_modules     — catalog and per-product toggles
  - role_product_modules                   — role grants
  - product_backlogs, backlog_epics, product_hypotheses
  - quarterly_roadmaps, roadmap_items      — unique (product_id, epic_id)
  - teams, capacity_plans, epic_efforts, effort_rating_configs

Tables created conditionally (IF NOT EXISTS semantics) to support idempotent
execution against databases that already received these tables via db.create_all()
in a development environment.

Revision ID: 5e1f0a7c2b10
Revises:
Create Date: 2026-10-19 09:12:44.102311
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = '5e1f0a7c2b10'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade():
    bind = op.get_bind()
    inspector = sa_inspect(bind)
    existing = set(inspector.get_table_names())

    # ── Organizations / roles / users ─────────────────────────────────────
    if "organizations" not in existing:
        op.create_table(
            "organizations",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
        )

    if "roles" not in existing:
        op.create_table(
            "roles",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("name"),
        )

    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(length=200), nullable=False),
            sa.Column("password_hash", sa.String(length=256), nullable=False),
            sa.Column("organization_id", sa.Integer(), nullable=True),
            sa.Column("is_superadmin", sa.Boolean(), nullable=False, server_default="0"),
            sa.Column("is_global_superadmin", sa.Boolean(), nullable=False, server_default="0"),
            sa.Column("role_id", sa.Integer(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_users_email", "users", ["email"], unique=True)
        op.create_index("ix_users_organization_id", "users", ["organization_id"])
        op.create_index("ix_users_role_id", "users", ["role_id"])

    # ── Module catalog / products ─────────────────────────────────────────
    if "modules" not in existing:
        op.create_table(
            "modules",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("icon", sa.String(length=50), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
            sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("name"),
        )

    if "products" not in existing:
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=True),
            sa.Column("organization_id", sa.Integer(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_products_user_id", "products", ["user_id"])
        op.create_index("ix_products_organization_id", "products", ["organization_id"])

    if "product_modules" not in existing:
        op.create_table(
            "product_modules",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("module_id", sa.Integer(), nullable=False),
            sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default="1"),
            sa.Column("completion_percentage", sa.Integer(), nullable=False, server_default="0"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["module_id"], ["modules.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id", "module_id", name="uq_product_module"),
        )
        op.create_index("ix_product_modules_product_id", "product_modules", ["product_id"])

    if "role_product_modules" not in existing:
        op.create_table(
            "role_product_modules",
            sa.Column("role_id", sa.Integer(), nullable=False),
            sa.Column("product_module_id", sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["product_module_id"], ["product_modules.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("role_id", "product_module_id"),
        )

    # ── Backlog / hypothesis ──────────────────────────────────────────────
    if "product_backlogs" not in existing:
        op.create_table(
            "product_backlogs",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id"),
        )

    if "backlog_epics" not in existing:
        op.create_table(
            "backlog_epics",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("backlog_id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("epic_id", sa.String(length=100), nullable=False),
            sa.Column("name", sa.String(length=300), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("theme_name", sa.String(length=200), nullable=True),
            sa.Column("theme_color", sa.String(length=20), nullable=True),
            sa.Column("initiative_name", sa.String(length=200), nullable=True),
            sa.Column("priority", sa.String(length=20), nullable=True),
            sa.Column("status", sa.String(length=30), nullable=True,
                      comment="new | in_progress | done | blocked | cancelled"),
            sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
            sa.ForeignKeyConstraint(["backlog_id"], ["product_backlogs.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id", "epic_id", name="uq_backlog_epic_product"),
        )
        op.create_index("ix_backlog_epics_product_id", "backlog_epics", ["product_id"])

    if "product_hypotheses" not in existing:
        op.create_table(
            "product_hypotheses",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("hypothesis_statement", sa.Text(), nullable=True),
            sa.Column("success_metrics", sa.Text(), nullable=True),
            sa.Column("assumptions", sa.Text(), nullable=True),
            sa.Column("initiatives", sa.Text(), nullable=True),
            sa.Column("themes", sa.Text(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id"),
        )

    # ── Roadmap ───────────────────────────────────────────────────────────
    if "quarterly_roadmaps" not in existing:
        op.create_table(
            "quarterly_roadmaps",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("quarter", sa.Integer(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id", "year", "quarter", name="uq_roadmap_product_quarter"),
            sa.CheckConstraint("quarter BETWEEN 1 AND 4", name="ck_roadmap_quarter"),
        )
        op.create_index("ix_quarterly_roadmaps_product_id", "quarterly_roadmaps", ["product_id"])

    if "roadmap_items" not in existing:
        op.create_table(
            "roadmap_items",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("roadmap_id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("epic_id", sa.String(length=100), nullable=False),
            sa.Column("epic_name", sa.String(length=300), nullable=True),
            sa.Column("epic_description", sa.Text(), nullable=True),
            sa.Column("priority", sa.String(length=20), nullable=True),
            sa.Column("status", sa.String(length=30), nullable=True),
            sa.Column("estimated_effort", sa.String(length=50), nullable=True),
            sa.Column("assigned_team", sa.String(length=200), nullable=True),
            sa.Column("reach", sa.Integer(), nullable=True),
            sa.Column("impact", sa.Float(), nullable=True),
            sa.Column("confidence", sa.Float(), nullable=True),
            sa.Column("rice_score", sa.Float(), nullable=True),
            sa.Column("effort_rating", sa.Integer(), nullable=True),
            sa.Column("initiative_name", sa.String(length=200), nullable=True),
            sa.Column("theme_name", sa.String(length=200), nullable=True),
            sa.Column("theme_color", sa.String(length=20), nullable=True),
            sa.Column("start_date", sa.Date(), nullable=True),
            sa.Column("end_date", sa.Date(), nullable=True),
            sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
            sa.ForeignKeyConstraint(["roadmap_id"], ["quarterly_roadmaps.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id", "epic_id", name="uq_roadmap_item_product_epic"),
        )
        op.create_index("ix_roadmap_items_roadmap_id", "roadmap_items", ["roadmap_id"])

    # ── Capacity planning ─────────────────────────────────────────────────
    if "teams" not in existing:
        op.create_table(
            "teams",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_teams_product_id", "teams", ["product_id"])

    if "capacity_plans" not in existing:
        op.create_table(
            "capacity_plans",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("quarter", sa.Integer(), nullable=False),
            sa.Column("effort_unit", sa.String(length=20), nullable=False, server_default="days"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id", "year", "quarter", name="uq_capacity_plan_quarter"),
        )
        op.create_index("ix_capacity_plans_product_id", "capacity_plans", ["product_id"])

    if "epic_efforts" not in existing:
        op.create_table(
            "epic_efforts",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("capacity_plan_id", sa.Integer(), nullable=False),
            sa.Column("epic_id", sa.String(length=100), nullable=False),
            sa.Column("epic_name", sa.String(length=300), nullable=True),
            sa.Column("team_id", sa.Integer(), nullable=False),
            sa.Column("effort_days", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("notes", sa.Text(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(["capacity_plan_id"], ["capacity_plans.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint(
                "capacity_plan_id", "epic_id", "team_id", name="uq_epic_effort_plan_epic_team",
            ),
        )
        op.create_index("ix_epic_efforts_capacity_plan_id", "epic_efforts", ["capacity_plan_id"])

    if "effort_rating_configs" not in existing:
        op.create_table(
            "effort_rating_configs",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("unit_type", sa.String(length=20), nullable=False, server_default="days"),
            sa.Column("star1_max", sa.Integer(), nullable=False),
            sa.Column("star2_max", sa.Integer(), nullable=False),
            sa.Column("star3_max", sa.Integer(), nullable=False),
            sa.Column("star4_max", sa.Integer(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("product_id", "unit_type", name="uq_effort_rating_unit"),
        )
        op.create_index("ix_effort_rating_configs_product_id", "effort_rating_configs", ["product_id"])


def downgrade():
    op.drop_table("effort_rating_configs")
    op.drop_table("epic_efforts")
    op.drop_table("capacity_plans")
    op.drop_table("teams")
    op.drop_table("roadmap_items")
    op.drop_table("quarterly_roadmaps")
    op.drop_table("product_hypotheses")
    op.drop_table("backlog_epics")
    op.drop_table("product_backlogs")
    op.drop_table("role_product_modules")
    op.drop_table("product_modules")
    op.drop_table("products")
    op.drop_table("modules")
    op.drop_table("users")
    op.drop_table("roles")
    op.drop_table("organizations")
