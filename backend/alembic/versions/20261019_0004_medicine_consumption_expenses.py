"""medicine consumption expenses

Revision ID: 20261019_0004
Revises: 20261019_0003
Create Date: 2026-10-19 11:05:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0004"
down_revision = "20261019_0003"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "medicine_consumption_expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "consumption_invoice_id",
            sa.Integer(),
            sa.ForeignKey("medicine_consumption_invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expense_type_id", sa.Integer(), sa.ForeignKey("expense_types.id"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("account_name", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_medicine_consumption_expenses_amount_non_negative"),
    )
    op.create_index(
        "ix_medicine_consumption_expenses_consumption_invoice_id",
        "medicine_consumption_expenses",
        ["consumption_invoice_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_medicine_consumption_expenses_consumption_invoice_id", table_name="medicine_consumption_expenses"
    )
    op.drop_table("medicine_consumption_expenses")
