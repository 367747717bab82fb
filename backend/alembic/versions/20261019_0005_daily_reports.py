"""daily reports and their links to invoices

Revision ID: 20261019_0005
Revises: 20261019_0004
Create Date: 2026-10-19 12:30:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0005"
down_revision = "20261019_0004"
branch_labels = None
depends_on = None

OLD_SOURCE_TYPES = "source_type IN ('invoice_item', 'manufacturing_item', 'manufacturing_output', 'medicine_item')"
NEW_SOURCE_TYPES = (
    "source_type IN ('invoice_item', 'manufacturing_item', 'manufacturing_output', 'medicine_item', "
    "'daily_report')"
)


def upgrade() -> None:
    op.create_table(
        "daily_reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False),
        sa.Column("report_date", sa.Date(), nullable=False),
        sa.Column("report_time", sa.Time(), nullable=True),
        sa.Column("production_eggs_healthy", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("production_eggs_deformed", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("production_eggs", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("production_egg_rate", sa.Numeric(7, 2), nullable=False, server_default="0"),
        sa.Column("eggs_sold", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("eggs_gift", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("previous_eggs_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("current_eggs_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("carton_consumption", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("chicks_before", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("chicks_dead", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("chicks_after", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("feed_daily_kg", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("feed_monthly_kg", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("feed_ratio", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("production_droppings", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("checked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "production_eggs_healthy >= 0 AND production_eggs_deformed >= 0 AND eggs_sold >= 0 AND eggs_gift >= 0",
            name="ck_daily_reports_eggs_non_negative",
        ),
        sa.CheckConstraint("chicks_dead >= 0", name="ck_daily_reports_chicks_dead_non_negative"),
    )
    op.create_index(
        "ix_daily_reports_warehouse_date",
        "daily_reports",
        ["warehouse_id", "report_date"],
        unique=False,
    )

    with op.batch_alter_table("invoices") as batch_op:
        batch_op.add_column(sa.Column("daily_report_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_invoices_daily_report_id", "daily_reports", ["daily_report_id"], ["id"], ondelete="SET NULL"
        )
        batch_op.create_index("ix_invoices_daily_report_id", ["daily_report_id"], unique=False)

    with op.batch_alter_table("medicine_consumption_invoices") as batch_op:
        batch_op.add_column(sa.Column("daily_report_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_medicine_consumption_invoices_daily_report_id",
            "daily_reports",
            ["daily_report_id"],
            ["id"],
            ondelete="SET NULL",
        )
        batch_op.create_index("ix_medicine_consumption_invoices_daily_report_id", ["daily_report_id"], unique=False)

    with op.batch_alter_table("inventory_movements") as batch_op:
        batch_op.drop_constraint("ck_inventory_movements_source_type", type_="check")
        batch_op.create_check_constraint("ck_inventory_movements_source_type", NEW_SOURCE_TYPES)


def downgrade() -> None:
    op.execute("DELETE FROM inventory_movements WHERE source_type = 'daily_report'")
    with op.batch_alter_table("inventory_movements") as batch_op:
        batch_op.drop_constraint("ck_inventory_movements_source_type", type_="check")
        batch_op.create_check_constraint("ck_inventory_movements_source_type", OLD_SOURCE_TYPES)

    with op.batch_alter_table("medicine_consumption_invoices") as batch_op:
        batch_op.drop_index("ix_medicine_consumption_invoices_daily_report_id")
        batch_op.drop_constraint("fk_medicine_consumption_invoices_daily_report_id", type_="foreignkey")
        batch_op.drop_column("daily_report_id")

    with op.batch_alter_table("invoices") as batch_op:
        batch_op.drop_index("ix_invoices_daily_report_id")
        batch_op.drop_constraint("fk_invoices_daily_report_id", type_="foreignkey")
        batch_op.drop_column("daily_report_id")

    op.drop_index("ix_daily_reports_warehouse_date", table_name="daily_reports")
    op.drop_table("daily_reports")
