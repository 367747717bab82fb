"""
Medicine Consumption Service — medicine usage per warehouse.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from farmledger.core.access import ensure_warehouse_access, owned_warehouse_ids
from farmledger.core.exceptions import DuplicateEntityException, EntityNotFoundException
from farmledger.models.medicine_consumption import (
    MedicineConsumptionExpense,
    MedicineConsumptionInvoice,
    MedicineConsumptionItem,
)
from farmledger.models.user import User
from farmledger.repositories.catalog_repository import ExpenseTypeRepository, MedicineRepository
from farmledger.repositories.medicine_consumption_repository import (
    MedicineConsumptionExpenseRepository,
    MedicineConsumptionItemRepository,
    MedicineConsumptionRepository,
)
from farmledger.schemas.medicine_consumption import (
    MedicineConsumptionCreate,
    MedicineConsumptionExpenseCreate,
    MedicineConsumptionItemCreate,
)
from farmledger.services.invoice_service import CENT, line_value
from farmledger.services.ledger_service import LedgerService
from farmledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


class MedicineConsumptionService:

    def __init__(self, db: Session):
        self._db = db
        self._repo = MedicineConsumptionRepository(db)
        self._item_repo = MedicineConsumptionItemRepository(db)
        self._expense_repo = MedicineConsumptionExpenseRepository(db)
        self._medicine_repo = MedicineRepository(db)
        self._expense_type_repo = ExpenseTypeRepository(db)

    def list_invoices(self, user: User) -> List[MedicineConsumptionInvoice]:
        return self._repo.list_filtered(warehouse_ids=owned_warehouse_ids(self._db, user))

    def get_invoice(self, invoice_id: int, user: User, write: bool = False) -> MedicineConsumptionInvoice:
        invoice = self._repo.get_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundException("Medicine consumption invoice", invoice_id)
        ensure_warehouse_access(self._db, user, invoice.warehouse_id, write=write)
        return invoice

    def create_invoice(self, data: MedicineConsumptionCreate, user: User) -> MedicineConsumptionInvoice:
        ensure_warehouse_access(self._db, user, data.warehouse_id, write=True)
        if self._repo.get_by_number(data.invoice_number):
            raise DuplicateEntityException(f"Invoice number {data.invoice_number} already exists")
        with unit_of_work(self._db, "create medicine consumption invoice"):
            invoice = self._repo.create(
                MedicineConsumptionInvoice(**data.model_dump(), created_by=user.id), commit=False
            )
        return invoice

    def delete_invoice(self, invoice_id: int, user: User) -> None:
        invoice = self.get_invoice(invoice_id, user, write=True)
        ledger = LedgerService(self._db, user_id=user.id)
        items = list(invoice.items)

        with unit_of_work(self._db, "delete medicine consumption invoice"):
            for item in items:
                ledger.reverse_medicine_consumption(item, invoice.warehouse_id)
            self._repo.delete(invoice, commit=False)
        logger.info(
            "Medicine consumption invoice deleted",
            extra={"consumption_invoice_id": invoice_id, "items_reversed": len(items), "user_id": user.id},
        )

    def list_items(self, invoice_id: int, user: User) -> List[MedicineConsumptionItem]:
        return list(self.get_invoice(invoice_id, user).items)

    def create_item(self, invoice_id: int, data: MedicineConsumptionItemCreate, user: User) -> MedicineConsumptionItem:
        invoice = self.get_invoice(invoice_id, user, write=True)
        if not self._medicine_repo.get_by_id(data.medicine_id):
            raise EntityNotFoundException("Medicine", data.medicine_id)
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "create medicine consumption item"):
            item = self._item_repo.create(
                MedicineConsumptionItem(
                    consumption_invoice_id=invoice.id,
                    value=line_value(data.quantity, data.price),
                    **data.model_dump(),
                ),
                commit=False,
            )
            ledger.apply_medicine_consumption(item, invoice.warehouse_id)
            self._recalculate_total(invoice)
        return item

    def delete_item(self, item_id: int, user: User) -> None:
        item = self._item_repo.get_by_id(item_id)
        if not item:
            raise EntityNotFoundException("Medicine consumption item", item_id)
        invoice = self.get_invoice(item.consumption_invoice_id, user, write=True)
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "delete medicine consumption item"):
            ledger.reverse_medicine_consumption(item, invoice.warehouse_id)
            self._item_repo.delete(item, commit=False)
            self._recalculate_total(invoice)

    def list_expenses(self, invoice_id: int, user: User) -> List[MedicineConsumptionExpense]:
        self.get_invoice(invoice_id, user)
        return self._expense_repo.list_for_invoice(invoice_id)

    def create_expense(
        self, invoice_id: int, data: MedicineConsumptionExpenseCreate, user: User
    ) -> MedicineConsumptionExpense:
        invoice = self.get_invoice(invoice_id, user, write=True)
        if not self._expense_type_repo.get_by_id(data.expense_type_id):
            raise EntityNotFoundException("Expense type", data.expense_type_id)

        with unit_of_work(self._db, "create medicine consumption expense"):
            expense = self._expense_repo.create(
                MedicineConsumptionExpense(consumption_invoice_id=invoice.id, **data.model_dump()), commit=False
            )
            self._recalculate_total(invoice)
        return expense

    def delete_expense(self, expense_id: int, user: User) -> None:
        expense = self._expense_repo.get_by_id(expense_id)
        if not expense:
            raise EntityNotFoundException("Medicine consumption expense", expense_id)
        invoice = self.get_invoice(expense.consumption_invoice_id, user, write=True)

        with unit_of_work(self._db, "delete medicine consumption expense"):
            self._expense_repo.delete(expense, commit=False)
            self._recalculate_total(invoice)

    def _recalculate_total(self, invoice: MedicineConsumptionInvoice) -> None:
        """Total value is the item values plus the attached expenses."""
        items_total = self._repo.sum_item_values(invoice.id)
        expenses_total = self._repo.sum_expense_amounts(invoice.id)
        invoice.total_value = (items_total + expenses_total).quantize(CENT)
        self._db.flush()
