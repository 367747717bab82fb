"""
Daily Reports Router — Thin Controller
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.database import get_db
from farmledger.dependencies import get_current_user, require_roles
from farmledger.models.user import User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.daily_report import (
    DailyReportCreate,
    DailyReportDetail,
    DailyReportResponse,
    DailyReportUpdate,
)
from farmledger.services.daily_report_service import DailyReportService

router = APIRouter(prefix="/daily-reports", tags=["Daily Reports"])

ADMIN_ONLY = ["admin"]
REVIEW_ROLES = ["admin", "sub_admin"]
PRODUCER_ROLES = ["admin", "farmer"]


def get_daily_report_service(db: Session = Depends(get_db)) -> DailyReportService:
    return DailyReportService(db)


@router.get("", response_model=ActionResult[List[DailyReportResponse]])
def list_daily_reports(
    warehouse_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    service: DailyReportService = Depends(get_daily_report_service),
    current_user: User = Depends(get_current_user),
):
    reports = service.list_reports(current_user, warehouse_id=warehouse_id, date_from=date_from, date_to=date_to)
    return ActionResult.ok([DailyReportResponse.model_validate(r) for r in reports])


@router.post("", response_model=ActionResult[DailyReportDetail], status_code=201)
def create_daily_report(
    data: DailyReportCreate,
    service: DailyReportService = Depends(get_daily_report_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    report = service.create_report(data, current_user)
    return ActionResult.ok(DailyReportDetail.model_validate(report))


@router.get("/{report_id}", response_model=ActionResult[DailyReportDetail])
def get_daily_report(
    report_id: int,
    service: DailyReportService = Depends(get_daily_report_service),
    current_user: User = Depends(get_current_user),
):
    return ActionResult.ok(DailyReportDetail.model_validate(service.get_report(report_id, current_user)))


@router.put("/{report_id}", response_model=ActionResult[DailyReportResponse])
def update_daily_report(
    report_id: int,
    data: DailyReportUpdate,
    service: DailyReportService = Depends(get_daily_report_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    report = service.update_report(report_id, data, current_user)
    return ActionResult.ok(DailyReportResponse.model_validate(report))


@router.patch("/{report_id}/checked", response_model=ActionResult[DailyReportResponse])
def toggle_daily_report_checked(
    report_id: int,
    service: DailyReportService = Depends(get_daily_report_service),
    _: User = Depends(require_roles(REVIEW_ROLES)),
):
    return ActionResult.ok(DailyReportResponse.model_validate(service.toggle_checked(report_id)))


@router.delete("/{report_id}", response_model=ActionResult[None])
def delete_daily_report(
    report_id: int,
    service: DailyReportService = Depends(get_daily_report_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_report(report_id, current_user)
    return ActionResult.ok()
