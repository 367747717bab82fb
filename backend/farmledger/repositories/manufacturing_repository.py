from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from farmledger.models.farm import Farm, Warehouse
from farmledger.models.manufacturing import ManufacturingExpense, ManufacturingInvoice, ManufacturingItem
from farmledger.repositories.base import BaseRepository


class ManufacturingInvoiceRepository(BaseRepository[ManufacturingInvoice]):
    def __init__(self, db: Session):
        super().__init__(ManufacturingInvoice, db)

    def get_by_number(self, invoice_number: str) -> Optional[ManufacturingInvoice]:
        return (
            self.db.query(ManufacturingInvoice)
            .filter(ManufacturingInvoice.invoice_number == invoice_number)
            .first()
        )

    def list_filtered(
        self,
        warehouse_id: Optional[int] = None,
        owner_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[ManufacturingInvoice]:
        q = self.db.query(ManufacturingInvoice)
        if warehouse_id is not None:
            q = q.filter(ManufacturingInvoice.warehouse_id == warehouse_id)
        if owner_id is not None:
            q = (
                q.join(Warehouse, Warehouse.id == ManufacturingInvoice.warehouse_id)
                .join(Farm, Farm.id == Warehouse.farm_id)
                .filter(Farm.user_id == owner_id)
            )
        if date_from is not None:
            q = q.filter(ManufacturingInvoice.manufacturing_date >= date_from)
        if date_to is not None:
            q = q.filter(ManufacturingInvoice.manufacturing_date <= date_to)
        return q.order_by(ManufacturingInvoice.manufacturing_date.desc(), ManufacturingInvoice.id.desc()).all()


class ManufacturingItemRepository(BaseRepository[ManufacturingItem]):
    def __init__(self, db: Session):
        super().__init__(ManufacturingItem, db)

    def list_for_invoice(self, invoice_id: int) -> List[ManufacturingItem]:
        return (
            self.db.query(ManufacturingItem)
            .filter(ManufacturingItem.manufacturing_invoice_id == invoice_id)
            .order_by(ManufacturingItem.id)
            .all()
        )


class ManufacturingExpenseRepository(BaseRepository[ManufacturingExpense]):
    def __init__(self, db: Session):
        super().__init__(ManufacturingExpense, db)

    def list_for_invoice(self, invoice_id: int) -> List[ManufacturingExpense]:
        return (
            self.db.query(ManufacturingExpense)
            .filter(ManufacturingExpense.manufacturing_invoice_id == invoice_id)
            .order_by(ManufacturingExpense.id)
            .all()
        )
