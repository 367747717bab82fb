from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from farmledger.schemas.invoice import InvoiceResponse
from farmledger.schemas.medicine_consumption import MedicineConsumptionResponse


class EggSaleItemCreate(BaseModel):
    unit_id: Optional[int] = None
    egg_weight: Optional[str] = Field(None, max_length=50)
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(Decimal("0"), ge=0)


class EggSaleCreate(BaseModel):
    client_id: Optional[int] = None
    items: List[EggSaleItemCreate] = Field(..., min_length=1)


class DroppingsSaleCreate(BaseModel):
    client_id: Optional[int] = None
    unit_id: Optional[int] = None
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(Decimal("0"), ge=0)


class DailyMedicineItemCreate(BaseModel):
    medicine_id: int
    unit_id: Optional[int] = None
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(Decimal("0"), ge=0)


class DailyReportCreate(BaseModel):
    """A day's figures plus the sales and medicine use recorded with them.

    ``chicks_before`` and ``previous_eggs_balance`` default to the closing
    figures of the warehouse's latest report; ``eggs_sold`` defaults to the
    quantity on the egg sale invoices.
    """

    warehouse_id: int
    report_date: date
    report_time: Optional[time] = None
    production_eggs_healthy: Decimal = Field(Decimal("0"), ge=0)
    production_eggs_deformed: Decimal = Field(Decimal("0"), ge=0)
    eggs_sold: Optional[Decimal] = Field(None, ge=0)
    eggs_gift: Decimal = Field(Decimal("0"), ge=0)
    previous_eggs_balance: Optional[Decimal] = Field(None, ge=0)
    carton_consumption: Decimal = Field(Decimal("0"), ge=0)
    chicks_before: Optional[int] = Field(None, ge=0)
    chicks_dead: int = Field(0, ge=0)
    feed_daily_kg: Decimal = Field(Decimal("0"), ge=0)
    feed_ratio: Decimal = Field(Decimal("0"), ge=0)
    production_droppings: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None

    egg_sales: List[EggSaleCreate] = []
    droppings_sale: Optional[DroppingsSaleCreate] = None
    medicine_items: List[DailyMedicineItemCreate] = []


class DailyReportUpdate(BaseModel):
    report_time: Optional[time] = None
    carton_consumption: Optional[Decimal] = Field(None, ge=0)
    feed_ratio: Optional[Decimal] = Field(None, ge=0)
    chicks_dead: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("carton_consumption", "feed_ratio", "chicks_dead")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class DailyReportResponse(BaseModel):
    id: int
    warehouse_id: int
    report_date: date
    report_time: Optional[time] = None
    production_eggs_healthy: Decimal
    production_eggs_deformed: Decimal
    production_eggs: Decimal
    production_egg_rate: Decimal
    eggs_sold: Decimal
    eggs_gift: Decimal
    previous_eggs_balance: Decimal
    current_eggs_balance: Decimal
    carton_consumption: Decimal
    chicks_before: int
    chicks_dead: int
    chicks_after: int
    feed_daily_kg: Decimal
    feed_monthly_kg: Decimal
    feed_ratio: Decimal
    production_droppings: Decimal
    notes: Optional[str] = None
    checked: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DailyReportDetail(DailyReportResponse):
    sale_invoices: List[InvoiceResponse] = []
    medicine_invoices: List[MedicineConsumptionResponse] = []
