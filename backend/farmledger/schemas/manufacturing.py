from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ManufacturingInvoiceCreate(BaseModel):
    invoice_number: str = Field(..., min_length=1, max_length=100)
    warehouse_id: int
    blend_name: Optional[str] = Field(None, max_length=200)
    material_name_id: Optional[int] = None
    unit_id: Optional[int] = None
    manufacturing_date: date
    manufacturing_time: Optional[time] = None
    notes: Optional[str] = None

    @field_validator("invoice_number")
    @classmethod
    def strip_invoice_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Invoice number is required")
        return v


class ManufacturingItemCreate(BaseModel):
    material_name_id: int
    unit_id: Optional[int] = None
    quantity: Decimal = Field(..., gt=0)
    blend_count: int = Field(1, ge=1)


class ManufacturingExpenseCreate(BaseModel):
    expense_type_id: int
    amount: Decimal = Field(..., ge=0)
    account_name: Optional[str] = Field(None, max_length=200)


class ManufacturingRunCreate(BaseModel):
    """Header, inputs and expenses submitted together."""

    invoice: ManufacturingInvoiceCreate
    items: List[ManufacturingItemCreate] = Field(..., min_length=1)
    expenses: List[ManufacturingExpenseCreate] = []


class ManufacturingItemResponse(BaseModel):
    id: int
    manufacturing_invoice_id: int
    material_name_id: int
    unit_id: Optional[int] = None
    quantity: Decimal
    blend_count: int
    weight: Decimal

    class Config:
        from_attributes = True


class ManufacturingExpenseResponse(BaseModel):
    id: int
    manufacturing_invoice_id: int
    expense_type_id: int
    amount: Decimal
    account_name: Optional[str] = None

    class Config:
        from_attributes = True


class ManufacturingInvoiceResponse(BaseModel):
    id: int
    invoice_number: str
    warehouse_id: int
    blend_name: Optional[str] = None
    material_name_id: Optional[int] = None
    unit_id: Optional[int] = None
    quantity: Decimal
    manufacturing_date: date
    manufacturing_time: Optional[time] = None
    notes: Optional[str] = None
    output_applied: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ManufacturingInvoiceDetail(ManufacturingInvoiceResponse):
    items: List[ManufacturingItemResponse] = []
    expenses: List[ManufacturingExpenseResponse] = []
