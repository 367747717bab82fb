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
    Text,
    Time,
    func,
)
from sqlalchemy.orm import relationship

from farmledger.database import Base


class DailyReport(Base):
    """One day of egg, flock and feed figures for a warehouse."""

    __tablename__ = "daily_reports"
    __table_args__ = (
        CheckConstraint(
            "production_eggs_healthy >= 0 AND production_eggs_deformed >= 0 AND eggs_sold >= 0 AND eggs_gift >= 0",
            name="ck_daily_reports_eggs_non_negative",
        ),
        CheckConstraint("chicks_dead >= 0", name="ck_daily_reports_chicks_dead_non_negative"),
        Index("ix_daily_reports_warehouse_date", "warehouse_id", "report_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False)
    report_date = Column(Date, nullable=False)
    report_time = Column(Time, nullable=True)

    production_eggs_healthy = Column(Numeric(12, 2), nullable=False, default=0)
    production_eggs_deformed = Column(Numeric(12, 2), nullable=False, default=0)
    production_eggs = Column(Numeric(12, 2), nullable=False, default=0)
    production_egg_rate = Column(Numeric(7, 2), nullable=False, default=0)
    eggs_sold = Column(Numeric(12, 2), nullable=False, default=0)
    eggs_gift = Column(Numeric(12, 2), nullable=False, default=0)
    previous_eggs_balance = Column(Numeric(12, 2), nullable=False, default=0)
    current_eggs_balance = Column(Numeric(12, 2), nullable=False, default=0)
    carton_consumption = Column(Numeric(12, 2), nullable=False, default=0)

    chicks_before = Column(Integer, nullable=False, default=0)
    chicks_dead = Column(Integer, nullable=False, default=0)
    chicks_after = Column(Integer, nullable=False, default=0)

    feed_daily_kg = Column(Numeric(12, 2), nullable=False, default=0)
    feed_monthly_kg = Column(Numeric(12, 2), nullable=False, default=0)
    feed_ratio = Column(Numeric(12, 2), nullable=False, default=0)
    production_droppings = Column(Numeric(12, 2), nullable=False, default=0)

    notes = Column(Text, nullable=True)
    checked = Column(Boolean, nullable=False, default=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    warehouse = relationship("Warehouse")
    sale_invoices = relationship("Invoice", order_by="Invoice.id")
    medicine_invoices = relationship("MedicineConsumptionInvoice", order_by="MedicineConsumptionInvoice.id")
