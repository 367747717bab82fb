"""
Report Service — inventory report rows, summary and cross-warehouse totals.
"""
from decimal import Decimal
from typing import List, Optional

import pandas as pd
from sqlalchemy.orm import Session

from farmledger.config import settings
from farmledger.models.material import Material
from farmledger.repositories.material_repository import MaterialRepository
from farmledger.schemas.material import AggregatedMaterial, InventorySummary
from farmledger.schemas.report import InventoryReportRow

CENT = Decimal("0.01")
COUNTERS = ["opening_balance", "purchases", "sales", "consumption", "manufacturing", "current_balance"]


def _dec(value) -> Decimal:
    return Decimal(str(round(float(value), 2))).quantize(CENT)


class ReportService:

    def __init__(self, db: Session, low_stock_threshold: Optional[float] = None):
        self._db = db
        self._repo = MaterialRepository(db)
        self._low_stock_threshold = float(
            low_stock_threshold if low_stock_threshold is not None else settings.LOW_STOCK_THRESHOLD
        )

    def inventory_report(
        self,
        warehouse_id: Optional[int] = None,
        warehouse_ids: Optional[List[int]] = None,
    ) -> List[InventoryReportRow]:
        materials = self._scoped(warehouse_id, warehouse_ids)
        rows = [
            InventoryReportRow(
                material_id=m.id,
                warehouse_id=m.warehouse_id,
                warehouse_name=m.warehouse.name,
                farm_name=m.warehouse.farm_name,
                material_name=m.display_name,
                unit_name=m.unit.unit_name if m.unit else "",
                **{c: getattr(m, c) for c in COUNTERS},
            )
            for m in materials
        ]
        return sorted(rows, key=lambda r: (r.current_balance, r.material_id))

    def inventory_summary(self, warehouse_ids: Optional[List[int]] = None) -> InventorySummary:
        materials = self._scoped(None, warehouse_ids)
        if not materials:
            return InventorySummary(
                total_materials=0,
                total_warehouses=0,
                low_stock_count=0,
                out_of_stock_count=0,
                total_current_balance=Decimal("0.00"),
            )
        df = pd.DataFrame(
            [{"warehouse_id": m.warehouse_id, "balance": float(m.current_balance)} for m in materials]
        )
        low = (df["balance"] > 0) & (df["balance"] < self._low_stock_threshold)
        return InventorySummary(
            total_materials=len(df),
            total_warehouses=int(df["warehouse_id"].nunique()),
            low_stock_count=int(low.sum()),
            out_of_stock_count=int((df["balance"] == 0).sum()),
            total_current_balance=_dec(df["balance"].sum()),
        )

    def aggregated_materials(self, warehouse_ids: Optional[List[int]] = None) -> List[AggregatedMaterial]:
        """Sum every counter across warehouses, grouped by item and unit."""
        materials = self._scoped(None, warehouse_ids)
        if not materials:
            return []
        df = pd.DataFrame([self._frame_row(m) for m in materials])
        grouped = (
            df.groupby(["item_key", "unit_key"], sort=False)
            .agg(
                material_name_id=("material_name_id", "first"),
                medicine_id=("medicine_id", "first"),
                unit_id=("unit_id", "first"),
                display_name=("display_name", "first"),
                unit_name=("unit_name", "first"),
                warehouse_count=("warehouse_id", "nunique"),
                **{c: (c, "sum") for c in COUNTERS},
            )
            .reset_index()
            .sort_values(["display_name", "unit_name"])
        )

        return [
            AggregatedMaterial(
                item_key=row.item_key,
                material_name_id=_optional_int(row.material_name_id),
                medicine_id=_optional_int(row.medicine_id),
                unit_id=_optional_int(row.unit_id),
                display_name=row.display_name,
                unit_name=row.unit_name,
                warehouse_count=int(row.warehouse_count),
                **{c: _dec(getattr(row, c)) for c in COUNTERS},
            )
            for row in grouped.itertuples(index=False)
        ]

    def _scoped(self, warehouse_id: Optional[int], warehouse_ids: Optional[List[int]]) -> List[Material]:
        materials = self._repo.list_filtered(warehouse_id=warehouse_id)
        if warehouse_ids is None:
            return materials
        return [m for m in materials if m.warehouse_id in warehouse_ids]

    @staticmethod
    def _frame_row(m: Material) -> dict:
        item_key = f"material:{m.material_name_id}" if m.material_name_id else f"medicine:{m.medicine_id}"
        row = {
            "item_key": item_key,
            "unit_key": m.unit_id if m.unit_id is not None else -1,
            "material_name_id": m.material_name_id,
            "medicine_id": m.medicine_id,
            "unit_id": m.unit_id,
            "display_name": m.display_name,
            "unit_name": m.unit.unit_name if m.unit else "",
            "warehouse_id": m.warehouse_id,
        }
        row.update({c: float(getattr(m, c)) for c in COUNTERS})
        return row


def _optional_int(value) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)
