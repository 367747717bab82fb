from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from farmledger.database import Base


class MedicineConsumptionInvoice(Base):
    __tablename__ = "medicine_consumption_invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(100), nullable=False, unique=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False, index=True)
    invoice_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    total_value = Column(Numeric(12, 2), nullable=False, default=0)
    daily_report_id = Column(Integer, ForeignKey("daily_reports.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "MedicineConsumptionItem",
        back_populates="consumption_invoice",
        cascade="all, delete-orphan",
        order_by="MedicineConsumptionItem.id",
    )
    expenses = relationship(
        "MedicineConsumptionExpense",
        back_populates="consumption_invoice",
        cascade="all, delete-orphan",
        order_by="MedicineConsumptionExpense.id",
    )


class MedicineConsumptionItem(Base):
    __tablename__ = "medicine_consumption_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_medicine_consumption_items_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_medicine_consumption_items_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    consumption_invoice_id = Column(
        Integer, ForeignKey("medicine_consumption_invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=False)
    unit_id = Column(Integer, ForeignKey("measurement_units.id"), nullable=True)
    administration_day = Column(String(50), nullable=True)
    administration_date = Column(Date, nullable=True)
    quantity = Column(Numeric(12, 2), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    value = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    consumption_invoice = relationship("MedicineConsumptionInvoice", back_populates="items")


class MedicineConsumptionExpense(Base):
    __tablename__ = "medicine_consumption_expenses"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_medicine_consumption_expenses_amount_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    consumption_invoice_id = Column(
        Integer, ForeignKey("medicine_consumption_invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expense_type_id = Column(Integer, ForeignKey("expense_types.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    account_name = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    consumption_invoice = relationship("MedicineConsumptionInvoice", back_populates="expenses")
