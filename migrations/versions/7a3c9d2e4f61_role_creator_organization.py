"""role_creator_organization

Roles record the organization that created them; org admins of other
organizations can no longer see or edit a role before it has holders.

Revision ID: 7a3c9d2e4f61
Revises: 5e1f0a7c2b10
Create Date: 2026-10-26 10:04:31.517204
"""

from alembic import op
import sqlalchemy as sa


revision = "7a3c9d2e4f61"
down_revision = "5e1f0a7c2b10"
branch_labels = None
depends_on = None


def _table_names(bind) -> set[str]:
    insp = sa.inspect(bind)
    return set(insp.get_table_names())


def _columns(bind, table_name: str) -> set[str]:
    insp = sa.inspect(bind)
    return {c["name"] for c in insp.get_columns(table_name)}


def _indexes(bind, table_name: str) -> set[str]:
    insp = sa.inspect(bind)
    return {i["name"] for i in insp.get_indexes(table_name) if i.get("name")}


def upgrade():
    bind = op.get_bind()
    if "roles" not in _table_names(bind):
        return

    if "organization_id" not in _columns(bind, "roles"):
        with op.batch_alter_table("roles") as batch_op:
            batch_op.add_column(sa.Column("organization_id", sa.Integer(), nullable=True))
            batch_op.create_foreign_key(
                "fk_roles_organization_id",
                "organizations",
                ["organization_id"],
                ["id"],
                ondelete="CASCADE",
            )

    if "ix_roles_organization_id" not in _indexes(bind, "roles"):
        op.create_index("ix_roles_organization_id", "roles", ["organization_id"])


def downgrade():
    bind = op.get_bind()
    if "roles" not in _table_names(bind):
        return

    if "ix_roles_organization_id" in _indexes(bind, "roles"):
        op.drop_index("ix_roles_organization_id", table_name="roles")

    if "organization_id" in _columns(bind, "roles"):
        with op.batch_alter_table("roles") as batch_op:
            batch_op.drop_constraint("fk_roles_organization_id", type_="foreignkey")
            batch_op.drop_column("organization_id")
