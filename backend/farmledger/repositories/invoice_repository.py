from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from farmledger.models.invoice import Invoice, InvoiceExpense, InvoiceItem
from farmledger.repositories.base import BaseRepository


class InvoiceRepository(BaseRepository[Invoice]):
    def __init__(self, db: Session):
        super().__init__(Invoice, db)

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]:
        return self.db.query(Invoice).filter(Invoice.invoice_number == invoice_number).first()

    def list_filtered(
        self,
        invoice_type: Optional[str] = None,
        warehouse_id: Optional[int] = None,
        client_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Invoice]:
        q = self.db.query(Invoice)
        if invoice_type is not None:
            q = q.filter(Invoice.invoice_type == invoice_type)
        if warehouse_id is not None:
            q = q.filter(Invoice.warehouse_id == warehouse_id)
        if client_id is not None:
            q = q.filter(Invoice.client_id == client_id)
        if date_from is not None:
            q = q.filter(Invoice.invoice_date >= date_from)
        if date_to is not None:
            q = q.filter(Invoice.invoice_date <= date_to)
        return q.order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).all()

    def sum_item_values(self, invoice_id: int) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(InvoiceItem.value), 0))
            .filter(InvoiceItem.invoice_id == invoice_id)
            .scalar()
        )
        return Decimal(str(total))

    def sum_expense_amounts(self, invoice_id: int) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(InvoiceExpense.amount), 0))
            .filter(InvoiceExpense.invoice_id == invoice_id)
            .scalar()
        )
        return Decimal(str(total))


class InvoiceItemRepository(BaseRepository[InvoiceItem]):
    def __init__(self, db: Session):
        super().__init__(InvoiceItem, db)

    def list_for_invoice(self, invoice_id: int) -> List[InvoiceItem]:
        return (
            self.db.query(InvoiceItem)
            .filter(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.id)
            .all()
        )


class InvoiceExpenseRepository(BaseRepository[InvoiceExpense]):
    def __init__(self, db: Session):
        super().__init__(InvoiceExpense, db)

    def list_for_invoice(self, invoice_id: int) -> List[InvoiceExpense]:
        return (
            self.db.query(InvoiceExpense)
            .filter(InvoiceExpense.invoice_id == invoice_id)
            .order_by(InvoiceExpense.id)
            .all()
        )
