"""
Reports Router — Thin Controller
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.core.access import ensure_warehouse_access, owned_warehouse_ids
from farmledger.database import get_db
from farmledger.dependencies import get_current_user
from farmledger.models.user import User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.material import InventorySummary
from farmledger.schemas.report import InventoryReportRow
from farmledger.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.get("/inventory", response_model=ActionResult[List[InventoryReportRow]])
def inventory_report(
    warehouse_id: Optional[int] = None,
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if warehouse_id is not None:
        ensure_warehouse_access(db, current_user, warehouse_id)
    rows = service.inventory_report(warehouse_id=warehouse_id, warehouse_ids=owned_warehouse_ids(db, current_user))
    return ActionResult.ok(rows)


@router.get("/inventory/summary", response_model=ActionResult[InventorySummary])
def inventory_report_summary(
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ActionResult.ok(service.inventory_summary(warehouse_ids=owned_warehouse_ids(db, current_user)))
