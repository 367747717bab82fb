from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class MedicineConsumptionCreate(BaseModel):
    invoice_number: str = Field(..., min_length=1, max_length=100)
    warehouse_id: int
    invoice_date: date
    notes: Optional[str] = None

    @field_validator("invoice_number")
    @classmethod
    def strip_invoice_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Invoice number is required")
        return v


class MedicineConsumptionItemCreate(BaseModel):
    medicine_id: int
    unit_id: Optional[int] = None
    administration_day: Optional[str] = Field(None, max_length=50)
    administration_date: Optional[date] = None
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(Decimal("0"), ge=0)


class MedicineConsumptionItemResponse(BaseModel):
    id: int
    consumption_invoice_id: int
    medicine_id: int
    unit_id: Optional[int] = None
    administration_day: Optional[str] = None
    administration_date: Optional[date] = None
    quantity: Decimal
    price: Decimal
    value: Decimal

    class Config:
        from_attributes = True


class MedicineConsumptionExpenseCreate(BaseModel):
    expense_type_id: int
    amount: Decimal = Field(..., ge=0)
    account_name: Optional[str] = Field(None, max_length=200)


class MedicineConsumptionExpenseResponse(BaseModel):
    id: int
    consumption_invoice_id: int
    expense_type_id: int
    amount: Decimal
    account_name: Optional[str] = None

    class Config:
        from_attributes = True


class MedicineConsumptionResponse(BaseModel):
    id: int
    invoice_number: str
    warehouse_id: int
    invoice_date: date
    notes: Optional[str] = None
    total_value: Decimal
    daily_report_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MedicineConsumptionDetail(MedicineConsumptionResponse):
    items: List[MedicineConsumptionItemResponse] = []
    expenses: List[MedicineConsumptionExpenseResponse] = []
