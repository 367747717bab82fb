from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from farmledger.database import Base


class Farm(Base):
    __tablename__ = "farms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    warehouse = relationship(
        "Warehouse", back_populates="farm", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    # One warehouse per farm.
    farm_id = Column(Integer, ForeignKey("farms.id", ondelete="CASCADE"), nullable=True, unique=True)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    farm = relationship("Farm", back_populates="warehouse")

    @property
    def farm_name(self):
        return self.farm.name if self.farm is not None else None
