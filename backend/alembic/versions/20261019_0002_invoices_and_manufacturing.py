"""invoices, manufacturing and medicine consumption tables

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 09:20:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_type", sa.String(length=10), nullable=False),
        sa.Column("invoice_number", sa.String(length=100), nullable=False, unique=True),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("invoice_time", sa.Time(), nullable=True),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("checked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_items_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_expenses_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("net_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("invoice_type IN ('buy', 'sell')", name="ck_invoices_type"),
    )
    op.create_index("ix_invoices_warehouse_date", "invoices", ["warehouse_id", "invoice_date"], unique=False)

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("material_name_id", sa.Integer(), sa.ForeignKey("materials_names.id"), nullable=True),
        sa.Column("medicine_id", sa.Integer(), sa.ForeignKey("medicines.id"), nullable=True),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("measurement_units.id"), nullable=True),
        sa.Column("egg_weight", sa.String(length=50), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("weight", sa.Numeric(12, 2), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
        sa.CheckConstraint("price >= 0", name="ck_invoice_items_price_non_negative"),
        sa.CheckConstraint(
            "(material_name_id IS NOT NULL AND medicine_id IS NULL) "
            "OR (material_name_id IS NULL AND medicine_id IS NOT NULL)",
            name="ck_invoice_items_exactly_one_item",
        ),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"], unique=False)

    op.create_table(
        "invoice_expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("expense_type_id", sa.Integer(), sa.ForeignKey("expense_types.id"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("account_name", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_invoice_expenses_amount_non_negative"),
    )
    op.create_index("ix_invoice_expenses_invoice_id", "invoice_expenses", ["invoice_id"], unique=False)

    op.create_table(
        "manufacturing_invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(length=100), nullable=False, unique=True),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False),
        sa.Column("blend_name", sa.String(length=200), nullable=True),
        sa.Column("material_name_id", sa.Integer(), sa.ForeignKey("materials_names.id"), nullable=True),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("measurement_units.id"), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("manufacturing_date", sa.Date(), nullable=False),
        sa.Column("manufacturing_time", sa.Time(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("output_applied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_manufacturing_invoices_quantity_non_negative"),
    )
    op.create_index(
        "ix_manufacturing_invoices_warehouse_id", "manufacturing_invoices", ["warehouse_id"], unique=False
    )

    op.create_table(
        "manufacturing_invoice_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "manufacturing_invoice_id",
            sa.Integer(),
            sa.ForeignKey("manufacturing_invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("material_name_id", sa.Integer(), sa.ForeignKey("materials_names.id"), nullable=False),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("measurement_units.id"), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("blend_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("weight", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_manufacturing_items_quantity_positive"),
        sa.CheckConstraint("blend_count >= 1", name="ck_manufacturing_items_blend_count_min"),
    )
    op.create_index(
        "ix_manufacturing_invoice_items_manufacturing_invoice_id",
        "manufacturing_invoice_items",
        ["manufacturing_invoice_id"],
        unique=False,
    )

    op.create_table(
        "manufacturing_invoice_expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "manufacturing_invoice_id",
            sa.Integer(),
            sa.ForeignKey("manufacturing_invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expense_type_id", sa.Integer(), sa.ForeignKey("expense_types.id"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("account_name", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_manufacturing_expenses_amount_non_negative"),
    )
    op.create_index(
        "ix_manufacturing_invoice_expenses_manufacturing_invoice_id",
        "manufacturing_invoice_expenses",
        ["manufacturing_invoice_id"],
        unique=False,
    )

    op.create_table(
        "medicine_consumption_invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(length=100), nullable=False, unique=True),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("total_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "ix_medicine_consumption_invoices_warehouse_id", "medicine_consumption_invoices", ["warehouse_id"], unique=False
    )

    op.create_table(
        "medicine_consumption_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "consumption_invoice_id",
            sa.Integer(),
            sa.ForeignKey("medicine_consumption_invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("medicine_id", sa.Integer(), sa.ForeignKey("medicines.id"), nullable=False),
        sa.Column("unit_id", sa.Integer(), sa.ForeignKey("measurement_units.id"), nullable=True),
        sa.Column("administration_day", sa.String(length=50), nullable=True),
        sa.Column("administration_date", sa.Date(), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_medicine_consumption_items_quantity_positive"),
        sa.CheckConstraint("price >= 0", name="ck_medicine_consumption_items_price_non_negative"),
    )
    op.create_index(
        "ix_medicine_consumption_items_consumption_invoice_id",
        "medicine_consumption_items",
        ["consumption_invoice_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_medicine_consumption_items_consumption_invoice_id", table_name="medicine_consumption_items")
    op.drop_table("medicine_consumption_items")
    op.drop_index("ix_medicine_consumption_invoices_warehouse_id", table_name="medicine_consumption_invoices")
    op.drop_table("medicine_consumption_invoices")
    op.drop_index(
        "ix_manufacturing_invoice_expenses_manufacturing_invoice_id", table_name="manufacturing_invoice_expenses"
    )
    op.drop_table("manufacturing_invoice_expenses")
    op.drop_index(
        "ix_manufacturing_invoice_items_manufacturing_invoice_id", table_name="manufacturing_invoice_items"
    )
    op.drop_table("manufacturing_invoice_items")
    op.drop_index("ix_manufacturing_invoices_warehouse_id", table_name="manufacturing_invoices")
    op.drop_table("manufacturing_invoices")
    op.drop_index("ix_invoice_expenses_invoice_id", table_name="invoice_expenses")
    op.drop_table("invoice_expenses")
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_table("invoice_items")
    op.drop_index("ix_invoices_warehouse_date", table_name="invoices")
    op.drop_table("invoices")
