from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)

from farmledger.database import Base


class InventoryMovement(Base):
    """Append-only trail of every counter change made by the ledger."""

    __tablename__ = "inventory_movements"
    __table_args__ = (
        CheckConstraint(
            "counter IN ('purchases', 'sales', 'consumption', 'manufacturing')",
            name="ck_inventory_movements_counter",
        ),
        CheckConstraint(
            "source_type IN ('invoice_item', 'manufacturing_item', 'manufacturing_output', 'medicine_item', "
            "'daily_report')",
            name="ck_inventory_movements_source_type",
        ),
        Index("ix_inventory_movements_material_created", "material_id", "created_at"),
        Index("ix_inventory_movements_source", "source_type", "source_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False)
    counter = Column(String(20), nullable=False)
    # Signed change applied to ``counter``; reversals are negative.
    quantity = Column(Numeric(12, 2), nullable=False)
    balance_after = Column(Numeric(12, 2), nullable=False)
    source_type = Column(String(30), nullable=False)
    source_id = Column(Integer, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
