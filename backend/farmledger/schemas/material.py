from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class MaterialCreate(BaseModel):
    warehouse_id: int
    material_name_id: Optional[int] = None
    medicine_id: Optional[int] = None
    unit_id: Optional[int] = None
    opening_balance: Decimal = Field(Decimal("0"), ge=0)

    @model_validator(mode="after")
    def check_exactly_one_item(self):
        if (self.material_name_id is None) == (self.medicine_id is None):
            raise ValueError("Exactly one of material_name_id or medicine_id is required")
        return self


class MaterialUpdate(BaseModel):
    unit_id: Optional[int] = None
    opening_balance: Optional[Decimal] = Field(None, ge=0)
    purchases: Optional[Decimal] = Field(None, ge=0)
    sales: Optional[Decimal] = Field(None, ge=0)
    consumption: Optional[Decimal] = Field(None, ge=0)
    manufacturing: Optional[Decimal] = Field(None, ge=0)


class MaterialResponse(BaseModel):
    id: int
    warehouse_id: int
    material_name_id: Optional[int] = None
    medicine_id: Optional[int] = None
    unit_id: Optional[int] = None
    display_name: str
    opening_balance: Decimal
    purchases: Decimal
    sales: Decimal
    consumption: Decimal
    manufacturing: Decimal
    current_balance: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MaterialBalance(BaseModel):
    balance: Decimal
    unit_name: str = ""
    unit_id: Optional[int] = None


class AggregatedMaterial(BaseModel):
    item_key: str
    material_name_id: Optional[int] = None
    medicine_id: Optional[int] = None
    unit_id: Optional[int] = None
    display_name: str
    unit_name: str = ""
    warehouse_count: int
    opening_balance: Decimal
    purchases: Decimal
    sales: Decimal
    consumption: Decimal
    manufacturing: Decimal
    current_balance: Decimal


class InventorySummary(BaseModel):
    total_materials: int
    total_warehouses: int
    low_stock_count: int
    out_of_stock_count: int
    total_current_balance: Decimal


class InventoryMovementResponse(BaseModel):
    id: int
    material_id: int
    counter: str
    quantity: Decimal
    balance_after: Decimal
    source_type: str
    source_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
