from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

InvoiceType = Literal["buy", "sell"]


class InvoiceCreate(BaseModel):
    invoice_type: InvoiceType
    invoice_number: str = Field(..., min_length=1, max_length=100)
    invoice_date: date
    invoice_time: Optional[time] = None
    warehouse_id: int
    client_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("invoice_number")
    @classmethod
    def strip_invoice_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Invoice number is required")
        return v


class InvoiceUpdate(BaseModel):
    invoice_type: Optional[InvoiceType] = None
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=100)
    invoice_date: Optional[date] = None
    invoice_time: Optional[time] = None
    warehouse_id: Optional[int] = None
    client_id: Optional[int] = None
    notes: Optional[str] = None
    checked: Optional[bool] = None

    @field_validator("invoice_type", "invoice_date", "warehouse_id", "checked")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("invoice_number")
    @classmethod
    def strip_invoice_number(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("invoice_number cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Invoice number is required")
        return v


class InvoiceResponse(BaseModel):
    id: int
    invoice_type: str
    invoice_number: str
    invoice_date: date
    invoice_time: Optional[time] = None
    warehouse_id: int
    client_id: Optional[int] = None
    notes: Optional[str] = None
    checked: bool
    daily_report_id: Optional[int] = None
    total_items_value: Decimal
    total_expenses_value: Decimal
    net_value: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvoiceItemCreate(BaseModel):
    material_name_id: Optional[int] = None
    medicine_id: Optional[int] = None
    unit_id: Optional[int] = None
    egg_weight: Optional[str] = None
    quantity: Decimal = Field(..., gt=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    price: Decimal = Field(Decimal("0"), ge=0)

    @model_validator(mode="after")
    def check_exactly_one_item(self):
        if (self.material_name_id is None) == (self.medicine_id is None):
            raise ValueError("Exactly one of material_name_id or medicine_id is required")
        return self


class InvoiceItemUpdate(BaseModel):
    quantity: Optional[Decimal] = Field(None, gt=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)


class InvoiceItemResponse(BaseModel):
    id: int
    invoice_id: int
    material_name_id: Optional[int] = None
    medicine_id: Optional[int] = None
    unit_id: Optional[int] = None
    egg_weight: Optional[str] = None
    quantity: Decimal
    weight: Optional[Decimal] = None
    price: Decimal
    value: Decimal

    class Config:
        from_attributes = True


class InvoiceExpenseCreate(BaseModel):
    expense_type_id: int
    amount: Decimal = Field(..., ge=0)
    account_name: Optional[str] = Field(None, max_length=200)


class InvoiceExpenseResponse(BaseModel):
    id: int
    invoice_id: int
    expense_type_id: int
    amount: Decimal
    account_name: Optional[str] = None

    class Config:
        from_attributes = True


class InvoiceDetail(InvoiceResponse):
    items: List[InvoiceItemResponse] = []
    expenses: List[InvoiceExpenseResponse] = []
