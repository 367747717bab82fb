from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, func

from farmledger.database import Base


class MeasurementUnit(Base):
    __tablename__ = "measurement_units"

    id = Column(Integer, primary_key=True, index=True)
    unit_name = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)


class MaterialName(Base):
    __tablename__ = "materials_names"

    id = Column(Integer, primary_key=True, index=True)
    material_name = Column(String(200), nullable=False, unique=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)


class Medicine(Base):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    day_of_age = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)


class Client(Base):
    __tablename__ = "clients"
    __table_args__ = (
        CheckConstraint("type IN ('customer', 'supplier')", name="ck_clients_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)
    type = Column(String(20), nullable=False, default="customer")
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)


class ExpenseType(Base):
    __tablename__ = "expense_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
