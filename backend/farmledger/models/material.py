from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from farmledger.database import Base


class Material(Base):
    """Per-warehouse inventory record for one material name or one medicine.

    ``current_balance`` is derived:
    opening_balance + purchases + manufacturing - sales - consumption.
    Only ``farmledger.services.ledger_service`` and explicit counter edits in
    the material service are allowed to write it.
    """

    __tablename__ = "materials"
    __table_args__ = (
        UniqueConstraint("warehouse_id", "material_name_id", name="uq_materials_warehouse_material"),
        UniqueConstraint("warehouse_id", "medicine_id", name="uq_materials_warehouse_medicine"),
        CheckConstraint(
            "(material_name_id IS NOT NULL AND medicine_id IS NULL) "
            "OR (material_name_id IS NULL AND medicine_id IS NOT NULL)",
            name="ck_materials_exactly_one_item",
        ),
        CheckConstraint("opening_balance >= 0", name="ck_materials_opening_non_negative"),
        CheckConstraint("purchases >= 0", name="ck_materials_purchases_non_negative"),
        CheckConstraint("sales >= 0", name="ck_materials_sales_non_negative"),
        CheckConstraint("consumption >= 0", name="ck_materials_consumption_non_negative"),
        CheckConstraint("manufacturing >= 0", name="ck_materials_manufacturing_non_negative"),
        CheckConstraint("current_balance >= 0", name="ck_materials_current_balance_non_negative"),
        Index("ix_materials_current_balance", "current_balance"),
    )

    id = Column(Integer, primary_key=True, index=True)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False, index=True)
    material_name_id = Column(Integer, ForeignKey("materials_names.id"), nullable=True, index=True)
    medicine_id = Column(Integer, ForeignKey("medicines.id"), nullable=True, index=True)
    unit_id = Column(Integer, ForeignKey("measurement_units.id"), nullable=True)

    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)
    purchases = Column(Numeric(12, 2), nullable=False, default=0)
    sales = Column(Numeric(12, 2), nullable=False, default=0)
    consumption = Column(Numeric(12, 2), nullable=False, default=0)
    manufacturing = Column(Numeric(12, 2), nullable=False, default=0)
    current_balance = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    warehouse = relationship("Warehouse")
    material_name = relationship("MaterialName")
    medicine = relationship("Medicine")
    unit = relationship("MeasurementUnit")

    @property
    def item_id(self):
        return self.material_name_id or self.medicine_id

    @property
    def display_name(self) -> str:
        if self.material_name is not None:
            return self.material_name.material_name
        if self.medicine is not None:
            return self.medicine.name
        return "Unknown"
