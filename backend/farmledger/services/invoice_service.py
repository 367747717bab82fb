"""
Invoice Service — buy/sell invoices, their items, expenses and totals.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from farmledger.core.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationException,
)
from farmledger.models.invoice import Invoice, InvoiceExpense, InvoiceItem
from farmledger.models.user import User
from farmledger.repositories.catalog_repository import ClientRepository, ExpenseTypeRepository
from farmledger.repositories.farm_repository import WarehouseRepository
from farmledger.repositories.invoice_repository import (
    InvoiceExpenseRepository,
    InvoiceItemRepository,
    InvoiceRepository,
)
from farmledger.schemas.invoice import (
    InvoiceCreate,
    InvoiceExpenseCreate,
    InvoiceItemCreate,
    InvoiceItemUpdate,
    InvoiceUpdate,
)
from farmledger.services.ledger_service import LedgerService
from farmledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def line_value(quantity: Decimal, price: Decimal) -> Decimal:
    return (Decimal(quantity) * Decimal(price)).quantize(CENT)


class InvoiceService:

    def __init__(self, db: Session):
        self._db = db
        self._repo = InvoiceRepository(db)
        self._item_repo = InvoiceItemRepository(db)
        self._expense_repo = InvoiceExpenseRepository(db)
        self._warehouse_repo = WarehouseRepository(db)
        self._client_repo = ClientRepository(db)
        self._expense_type_repo = ExpenseTypeRepository(db)

    # ── Invoices ─────────────────────────────────────────────────────────────

    def list_invoices(
        self,
        invoice_type: Optional[str] = None,
        warehouse_id: Optional[int] = None,
        client_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Invoice]:
        return self._repo.list_filtered(
            invoice_type=invoice_type,
            warehouse_id=warehouse_id,
            client_id=client_id,
            date_from=date_from,
            date_to=date_to,
        )

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self._repo.get_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundException("Invoice", invoice_id)
        return invoice

    def create_invoice(self, data: InvoiceCreate, user: User) -> Invoice:
        if self._repo.get_by_number(data.invoice_number):
            raise DuplicateEntityException(f"Invoice number {data.invoice_number} already exists")
        self._require_warehouse(data.warehouse_id)
        if data.client_id is not None and not self._client_repo.get_by_id(data.client_id):
            raise EntityNotFoundException("Client", data.client_id)

        with unit_of_work(self._db, "create invoice"):
            invoice = self._repo.create(Invoice(**data.model_dump(), created_by=user.id), commit=False)
        logger.info(
            "Invoice created",
            extra={"invoice_id": invoice.id, "invoice_type": invoice.invoice_type, "user_id": user.id},
        )
        return invoice

    def update_invoice(self, invoice_id: int, data: InvoiceUpdate) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        updates = data.model_dump(exclude_unset=True)

        number = updates.get("invoice_number")
        if number is not None:
            existing = self._repo.get_by_number(number)
            if existing and existing.id != invoice.id:
                raise DuplicateEntityException(f"Invoice number {number} already exists")

        changes_stock_side = (
            ("invoice_type" in updates and updates["invoice_type"] != invoice.invoice_type)
            or ("warehouse_id" in updates and updates["warehouse_id"] != invoice.warehouse_id)
        )
        if changes_stock_side and self._item_repo.list_for_invoice(invoice.id):
            raise ValidationException("Invoice type and warehouse cannot change once the invoice has items")
        if "warehouse_id" in updates:
            self._require_warehouse(updates["warehouse_id"])
        if updates.get("client_id") is not None and not self._client_repo.get_by_id(updates["client_id"]):
            raise EntityNotFoundException("Client", updates["client_id"])

        with unit_of_work(self._db, "update invoice"):
            self._repo.update(invoice, updates, commit=False)
        return invoice

    def delete_invoice(self, invoice_id: int, user: User) -> None:
        """Reverse every item's stock effect, then delete the invoice."""
        invoice = self.get_invoice(invoice_id)
        ledger = LedgerService(self._db, user_id=user.id)
        items = self._item_repo.list_for_invoice(invoice.id)

        with unit_of_work(self._db, "delete invoice"):
            for item in items:
                ledger.reverse_invoice_item(item, invoice.invoice_type, invoice.warehouse_id)
            self._repo.delete(invoice, commit=False)
        logger.info(
            "Invoice deleted",
            extra={"invoice_id": invoice_id, "items_reversed": len(items), "user_id": user.id},
        )

    # ── Items ────────────────────────────────────────────────────────────────

    def list_items(self, invoice_id: int) -> List[InvoiceItem]:
        self.get_invoice(invoice_id)
        return self._item_repo.list_for_invoice(invoice_id)

    def create_item(self, invoice_id: int, data: InvoiceItemCreate, user: User) -> InvoiceItem:
        invoice = self.get_invoice(invoice_id)
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "create invoice item"):
            item = self._item_repo.create(
                InvoiceItem(
                    invoice_id=invoice.id,
                    value=line_value(data.quantity, data.price),
                    **data.model_dump(),
                ),
                commit=False,
            )
            ledger.apply_invoice_item(item, invoice.invoice_type, invoice.warehouse_id)
            self._recalculate_totals(invoice)
        return item

    def update_item(self, item_id: int, data: InvoiceItemUpdate, user: User) -> InvoiceItem:
        item = self._get_item(item_id)
        invoice = self.get_invoice(item.invoice_id)
        ledger = LedgerService(self._db, user_id=user.id)
        old_quantity = Decimal(item.quantity)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        with unit_of_work(self._db, "update invoice item"):
            self._item_repo.update(item, updates, commit=False)
            item.value = line_value(item.quantity, item.price)
            ledger.adjust_invoice_item(item, invoice.invoice_type, invoice.warehouse_id, old_quantity)
            self._recalculate_totals(invoice)
        return item

    def delete_item(self, item_id: int, user: User) -> None:
        item = self._get_item(item_id)
        invoice = self.get_invoice(item.invoice_id)
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "delete invoice item"):
            ledger.reverse_invoice_item(item, invoice.invoice_type, invoice.warehouse_id)
            self._item_repo.delete(item, commit=False)
            self._recalculate_totals(invoice)

    # ── Expenses ─────────────────────────────────────────────────────────────

    def list_expenses(self, invoice_id: int) -> List[InvoiceExpense]:
        self.get_invoice(invoice_id)
        return self._expense_repo.list_for_invoice(invoice_id)

    def create_expense(self, invoice_id: int, data: InvoiceExpenseCreate) -> InvoiceExpense:
        invoice = self.get_invoice(invoice_id)
        if not self._expense_type_repo.get_by_id(data.expense_type_id):
            raise EntityNotFoundException("Expense type", data.expense_type_id)

        with unit_of_work(self._db, "create invoice expense"):
            expense = self._expense_repo.create(
                InvoiceExpense(invoice_id=invoice.id, **data.model_dump()), commit=False
            )
            self._recalculate_totals(invoice)
        return expense

    def delete_expense(self, expense_id: int) -> None:
        expense = self._expense_repo.get_by_id(expense_id)
        if not expense:
            raise EntityNotFoundException("Expense", expense_id)
        invoice = self.get_invoice(expense.invoice_id)

        with unit_of_work(self._db, "delete invoice expense"):
            self._expense_repo.delete(expense, commit=False)
            self._recalculate_totals(invoice)

    # ── Internals ────────────────────────────────────────────────────────────

    def _get_item(self, item_id: int) -> InvoiceItem:
        item = self._item_repo.get_by_id(item_id)
        if not item:
            raise EntityNotFoundException("Invoice item", item_id)
        return item

    def _require_warehouse(self, warehouse_id: int) -> None:
        if not self._warehouse_repo.get_by_id(warehouse_id):
            raise EntityNotFoundException("Warehouse", warehouse_id)

    def _recalculate_totals(self, invoice: Invoice) -> None:
        items_total = self._repo.sum_item_values(invoice.id).quantize(CENT)
        expenses_total = self._repo.sum_expense_amounts(invoice.id).quantize(CENT)
        invoice.total_items_value = items_total
        invoice.total_expenses_value = expenses_total
        invoice.net_value = items_total + expenses_total
        self._db.flush()
