"""core schema: users, farms, warehouses, catalog and materials

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True):
    cols = [sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False))
    return cols


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin', 'sub_admin', 'farmer')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "farms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_farms_user_id", "farms", ["user_id"], unique=False)

    op.create_table(
        "warehouses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("farm_id", sa.Integer(), sa.ForeignKey("farms.id", ondelete="CASCADE"), nullable=True, unique=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "measurement_units",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("unit_name", sa.String(length=100), nullable=False, unique=True),
        *_timestamps(updated=False),
    )
    op.create_table(
        "materials_names",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("material_name", sa.String(length=200), nullable=False, unique=True),
        *_timestamps(updated=False),
    )
    op.create_table(
        "medicines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("day_of_age", sa.String(length=50), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="customer"),
        sa.Column("phone", sa.String(length=50), nullable=True),
        *_timestamps(updated=False),
        sa.CheckConstraint("type IN ('customer', 'supplier')", name="ck_clients_type"),
    )
    op.create_table(
        "expense_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        "materials",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_name_id", sa.Integer(), sa.ForeignKey("materials_names.id"), nullable=True),
        sa.Column("medicine_id", sa.Integer(), sa.ForeignKey("medicines.id"), nullable=True),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("measurement_units.id"), nullable=True),
        sa.Column("opening_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("purchases", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("sales", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("consumption", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("manufacturing", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("current_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("warehouse_id", "material_name_id", name="uq_materials_warehouse_material"),
        sa.UniqueConstraint("warehouse_id", "medicine_id", name="uq_materials_warehouse_medicine"),
        sa.CheckConstraint(
            "(material_name_id IS NOT NULL AND medicine_id IS NULL) "
            "OR (material_name_id IS NULL AND medicine_id IS NOT NULL)",
            name="ck_materials_exactly_one_item",
        ),
        sa.CheckConstraint("opening_balance >= 0", name="ck_materials_opening_non_negative"),
        sa.CheckConstraint("purchases >= 0", name="ck_materials_purchases_non_negative"),
        sa.CheckConstraint("sales >= 0", name="ck_materials_sales_non_negative"),
        sa.CheckConstraint("consumption >= 0", name="ck_materials_consumption_non_negative"),
        sa.CheckConstraint("manufacturing >= 0", name="ck_materials_manufacturing_non_negative"),
        sa.CheckConstraint("current_balance >= 0", name="ck_materials_current_balance_non_negative"),
    )
    op.create_index("ix_materials_warehouse_id", "materials", ["warehouse_id"], unique=False)
    op.create_index("ix_materials_material_name_id", "materials", ["material_name_id"], unique=False)
    op.create_index("ix_materials_medicine_id", "materials", ["medicine_id"], unique=False)
    op.create_index("ix_materials_current_balance", "materials", ["current_balance"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_materials_current_balance", table_name="materials")
    op.drop_index("ix_materials_medicine_id", table_name="materials")
    op.drop_index("ix_materials_material_name_id", table_name="materials")
    op.drop_index("ix_materials_warehouse_id", table_name="materials")
    op.drop_table("materials")
    op.drop_table("expense_types")
    op.drop_table("clients")
    op.drop_table("medicines")
    op.drop_table("materials_names")
    op.drop_table("measurement_units")
    op.drop_table("warehouses")
    op.drop_index("ix_farms_user_id", table_name="farms")
    op.drop_table("farms")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
