from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class InventoryReportRow(BaseModel):
    material_id: int
    warehouse_id: int
    warehouse_name: str
    farm_name: Optional[str] = None
    material_name: str
    unit_name: str = ""
    opening_balance: Decimal
    purchases: Decimal
    sales: Decimal
    consumption: Decimal
    manufacturing: Decimal
    current_balance: Decimal
