from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship

from farmledger.database import Base

INVOICE_TYPE_BUY = "buy"
INVOICE_TYPE_SELL = "sell"
INVOICE_TYPES = (INVOICE_TYPE_BUY, INVOICE_TYPE_SELL)


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("invoice_type IN ('buy', 'sell')", name="ck_invoices_type"),
        Index("ix_invoices_warehouse_date", "warehouse_id", "invoice_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    invoice_type = Column(String(10), nullable=False)
    invoice_number = Column(String(100), nullable=False, unique=True)
    invoice_date = Column(Date, nullable=False)
    invoice_time = Column(Time, nullable=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    notes = Column(Text, nullable=True)
    checked = Column(Boolean, nullable=False, default=False)
    # Set when the invoice was raised by a daily production report.
    daily_report_id = Column(Integer, ForeignKey("daily_reports.id", ondelete="SET NULL"), nullable=True, index=True)
    total_items_value = Column(Numeric(12, 2), nullable=False, default=0)
    total_expenses_value = Column(Numeric(12, 2), nullable=False, default=0)
    net_value = Column(Numeric(12, 2), nullable=False, default=0)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan")
    expenses = relationship("InvoiceExpense", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceItem(Base):
    __tablename__ = "invoice_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_invoice_items_price_non_negative"),
        CheckConstraint(
            "(material_name_id IS NOT NULL AND medicine_id IS NULL) "
            "OR (material_name_id IS NULL AND medicine_id IS NOT NULL)",
            name="ck_invoice_items_exactly_one_item",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    material_name_id = Column(Integer, ForeignKey("materials_names.id"), nullable=True)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=True)
    unit_id = Column(Integer, ForeignKey("measurement_units.id"), nullable=True)
    egg_weight = Column(String(50), nullable=True)
    quantity = Column(Numeric(12, 2), nullable=False)
    weight = Column(Numeric(12, 2), nullable=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    value = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    invoice = relationship("Invoice", back_populates="items")


class InvoiceExpense(Base):
    __tablename__ = "invoice_expenses"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_invoice_expenses_amount_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    expense_type_id = Column(Integer, ForeignKey("expense_types.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    account_name = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    invoice = relationship("Invoice", back_populates="expenses")
