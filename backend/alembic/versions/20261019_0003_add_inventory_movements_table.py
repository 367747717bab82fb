"""add inventory_movements table

Revision ID: 20261019_0003
Revises: 20261019_0002
Create Date: 2026-10-19 09:40:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0003"
down_revision = "20261019_0002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "inventory_movements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("material_id", sa.Integer(), sa.ForeignKey("materials.id", ondelete="CASCADE"), nullable=False),
        sa.Column("counter", sa.String(length=20), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("balance_after", sa.Numeric(12, 2), nullable=False),
        sa.Column("source_type", sa.String(length=30), nullable=False),
        sa.Column("source_id", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "counter IN ('purchases', 'sales', 'consumption', 'manufacturing')",
            name="ck_inventory_movements_counter",
        ),
        sa.CheckConstraint(
            "source_type IN ('invoice_item', 'manufacturing_item', 'manufacturing_output', 'medicine_item')",
            name="ck_inventory_movements_source_type",
        ),
    )
    op.create_index(
        "ix_inventory_movements_material_created",
        "inventory_movements",
        ["material_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_inventory_movements_source",
        "inventory_movements",
        ["source_type", "source_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_inventory_movements_source", table_name="inventory_movements")
    op.drop_index("ix_inventory_movements_material_created", table_name="inventory_movements")
    op.drop_table("inventory_movements")
