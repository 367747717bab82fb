from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from farmledger.models.medicine_consumption import (
    MedicineConsumptionExpense,
    MedicineConsumptionInvoice,
    MedicineConsumptionItem,
)
from farmledger.repositories.base import BaseRepository


class MedicineConsumptionRepository(BaseRepository[MedicineConsumptionInvoice]):
    def __init__(self, db: Session):
        super().__init__(MedicineConsumptionInvoice, db)

    def get_by_number(self, invoice_number: str) -> Optional[MedicineConsumptionInvoice]:
        return (
            self.db.query(MedicineConsumptionInvoice)
            .filter(MedicineConsumptionInvoice.invoice_number == invoice_number)
            .first()
        )

    def list_filtered(self, warehouse_ids: Optional[List[int]] = None) -> List[MedicineConsumptionInvoice]:
        q = self.db.query(MedicineConsumptionInvoice)
        if warehouse_ids is not None:
            q = q.filter(MedicineConsumptionInvoice.warehouse_id.in_(warehouse_ids))
        return q.order_by(MedicineConsumptionInvoice.invoice_date.desc(), MedicineConsumptionInvoice.id.desc()).all()

    def sum_item_values(self, invoice_id: int) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(MedicineConsumptionItem.value), 0))
            .filter(MedicineConsumptionItem.consumption_invoice_id == invoice_id)
            .scalar()
        )
        return Decimal(str(total))

    def sum_expense_amounts(self, invoice_id: int) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(MedicineConsumptionExpense.amount), 0))
            .filter(MedicineConsumptionExpense.consumption_invoice_id == invoice_id)
            .scalar()
        )
        return Decimal(str(total))


class MedicineConsumptionItemRepository(BaseRepository[MedicineConsumptionItem]):
    def __init__(self, db: Session):
        super().__init__(MedicineConsumptionItem, db)


class MedicineConsumptionExpenseRepository(BaseRepository[MedicineConsumptionExpense]):
    def __init__(self, db: Session):
        super().__init__(MedicineConsumptionExpense, db)

    def list_for_invoice(self, invoice_id: int) -> List[MedicineConsumptionExpense]:
        return (
            self.db.query(MedicineConsumptionExpense)
            .filter(MedicineConsumptionExpense.consumption_invoice_id == invoice_id)
            .order_by(MedicineConsumptionExpense.id)
            .all()
        )
