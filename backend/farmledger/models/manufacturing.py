from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship

from farmledger.database import Base


class ManufacturingInvoice(Base):
    """A feed blend produced in one warehouse from input materials."""

    __tablename__ = "manufacturing_invoices"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_manufacturing_invoices_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(100), nullable=False, unique=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    blend_name = Column(String(200), nullable=True)
    material_name_id = Column(Integer, ForeignKey("materials_names.id"), nullable=True)
    unit_id = Column(Integer, ForeignKey("measurement_units.id"), nullable=True)
    quantity = Column(Numeric(12, 2), nullable=False, default=0)
    manufacturing_date = Column(Date, nullable=False)
    manufacturing_time = Column(Time, nullable=True)
    notes = Column(Text, nullable=True)
    output_applied = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "ManufacturingItem",
        back_populates="manufacturing_invoice",
        cascade="all, delete-orphan",
        order_by="ManufacturingItem.id",
    )
    expenses = relationship(
        "ManufacturingExpense",
        back_populates="manufacturing_invoice",
        cascade="all, delete-orphan",
    )


class ManufacturingItem(Base):
    __tablename__ = "manufacturing_invoice_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_manufacturing_items_quantity_positive"),
        CheckConstraint("blend_count >= 1", name="ck_manufacturing_items_blend_count_min"),
    )

    id = Column(Integer, primary_key=True, index=True)
    manufacturing_invoice_id = Column(
        Integer, ForeignKey("manufacturing_invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    material_name_id = Column(Integer, ForeignKey("materials_names.id"), nullable=False)
    unit_id = Column(Integer, ForeignKey("measurement_units.id"), nullable=True)
    quantity = Column(Numeric(12, 2), nullable=False)
    blend_count = Column(Integer, nullable=False, default=1)
    # quantity * blend_count
    weight = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    manufacturing_invoice = relationship("ManufacturingInvoice", back_populates="items")


class ManufacturingExpense(Base):
    __tablename__ = "manufacturing_invoice_expenses"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_manufacturing_expenses_amount_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    manufacturing_invoice_id = Column(
        Integer, ForeignKey("manufacturing_invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expense_type_id = Column(Integer, ForeignKey("expense_types.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    account_name = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    manufacturing_invoice = relationship("ManufacturingInvoice", back_populates="expenses")
