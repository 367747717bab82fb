from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from farmledger.models.daily_report import DailyReport
from farmledger.repositories.base import BaseRepository


def month_bounds(day: date) -> tuple:
    """First day of ``day``'s month and first day of the following month."""
    start = day.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


class DailyReportRepository(BaseRepository[DailyReport]):
    def __init__(self, db: Session):
        super().__init__(DailyReport, db)

    def list_filtered(
        self,
        warehouse_ids: Optional[List[int]] = None,
        warehouse_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[DailyReport]:
        q = self.db.query(DailyReport)
        if warehouse_ids is not None:
            q = q.filter(DailyReport.warehouse_id.in_(warehouse_ids))
        if warehouse_id is not None:
            q = q.filter(DailyReport.warehouse_id == warehouse_id)
        if date_from is not None:
            q = q.filter(DailyReport.report_date >= date_from)
        if date_to is not None:
            q = q.filter(DailyReport.report_date <= date_to)
        return q.order_by(DailyReport.report_date.desc(), DailyReport.id.desc()).all()

    def latest_for_warehouse(self, warehouse_id: int) -> Optional[DailyReport]:
        return (
            self.db.query(DailyReport)
            .filter(DailyReport.warehouse_id == warehouse_id)
            .order_by(DailyReport.report_date.desc(), DailyReport.id.desc())
            .first()
        )

    def sum_feed_for_month(self, warehouse_id: int, day: date) -> Decimal:
        start, end = month_bounds(day)
        total = (
            self.db.query(func.coalesce(func.sum(DailyReport.feed_daily_kg), 0))
            .filter(
                DailyReport.warehouse_id == warehouse_id,
                DailyReport.report_date >= start,
                DailyReport.report_date < end,
            )
            .scalar()
        )
        return Decimal(str(total))
