"""
Manufacturing Service — feed blends: input items, output, expenses and the
full manufacturing run.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from farmledger.core.access import ensure_warehouse_access
from farmledger.core.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    FarmLedgerException,
    InsufficientStockException,
    ValidationException,
)
from farmledger.models.manufacturing import ManufacturingExpense, ManufacturingInvoice, ManufacturingItem
from farmledger.models.user import ROLE_FARMER, User
from farmledger.repositories.catalog_repository import ExpenseTypeRepository, MaterialNameRepository
from farmledger.repositories.manufacturing_repository import (
    ManufacturingExpenseRepository,
    ManufacturingInvoiceRepository,
    ManufacturingItemRepository,
)
from farmledger.schemas.manufacturing import (
    ManufacturingExpenseCreate,
    ManufacturingInvoiceCreate,
    ManufacturingItemCreate,
    ManufacturingRunCreate,
)
from farmledger.services.ledger_service import LedgerService, item_weight
from farmledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


class ManufacturingService:

    def __init__(self, db: Session):
        self._db = db
        self._repo = ManufacturingInvoiceRepository(db)
        self._item_repo = ManufacturingItemRepository(db)
        self._expense_repo = ManufacturingExpenseRepository(db)
        self._material_name_repo = MaterialNameRepository(db)
        self._expense_type_repo = ExpenseTypeRepository(db)

    # ── Invoices ─────────────────────────────────────────────────────────────

    def list_invoices(
        self,
        user: User,
        warehouse_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[ManufacturingInvoice]:
        owner_id = user.id if user.role == ROLE_FARMER else None
        return self._repo.list_filtered(
            warehouse_id=warehouse_id, owner_id=owner_id, date_from=date_from, date_to=date_to
        )

    def get_invoice(self, invoice_id: int, user: Optional[User] = None) -> ManufacturingInvoice:
        invoice = self._repo.get_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundException("Manufacturing invoice", invoice_id)
        if user is not None:
            ensure_warehouse_access(self._db, user, invoice.warehouse_id)
        return invoice

    def create_invoice(self, data: ManufacturingInvoiceCreate, user: User) -> ManufacturingInvoice:
        self._check_new_header(data, user)
        with unit_of_work(self._db, "create manufacturing invoice"):
            invoice = self._repo.create(
                ManufacturingInvoice(**data.model_dump(), created_by=user.id), commit=False
            )
        logger.info(
            "Manufacturing invoice created",
            extra={"manufacturing_invoice_id": invoice.id, "warehouse_id": invoice.warehouse_id, "user_id": user.id},
        )
        return invoice

    def rollback_invoice(self, invoice_id: int) -> None:
        """Delete the header and, by cascade, its items and expenses.

        Balances are left exactly as they are.
        """
        invoice = self._repo.get_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundException("Manufacturing invoice", invoice_id)
        with unit_of_work(self._db, "rollback manufacturing invoice"):
            self._repo.delete(invoice, commit=False)
        logger.warning("Manufacturing invoice rolled back", extra={"manufacturing_invoice_id": invoice_id})

    def delete_invoice(self, invoice_id: int, user: User) -> None:
        """Reverse the output (when applied) and every input, then delete."""
        invoice = self.get_invoice(invoice_id)
        ledger = LedgerService(self._db, user_id=user.id)
        items = self._item_repo.list_for_invoice(invoice.id)

        with unit_of_work(self._db, "delete manufacturing invoice"):
            ledger.reverse_manufacturing_output(invoice)
            for item in items:
                ledger.reverse_manufacturing_item(item, invoice.warehouse_id)
            self._repo.delete(invoice, commit=False)
        logger.info(
            "Manufacturing invoice deleted",
            extra={"manufacturing_invoice_id": invoice_id, "items_reversed": len(items), "user_id": user.id},
        )

    # ── Items ────────────────────────────────────────────────────────────────

    def list_items(self, invoice_id: int, user: User) -> List[ManufacturingItem]:
        self.get_invoice(invoice_id, user)
        return self._item_repo.list_for_invoice(invoice_id)

    def create_item(self, invoice_id: int, data: ManufacturingItemCreate, user: User) -> ManufacturingItem:
        invoice = self.get_invoice(invoice_id)
        ensure_warehouse_access(self._db, user, invoice.warehouse_id, write=True)
        if invoice.output_applied:
            raise ValidationException("Inputs cannot change after the output was added to inventory")
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "create manufacturing item"):
            item = self._add_item(invoice, data, ledger)
        return item

    def delete_item(self, item_id: int, user: User) -> None:
        item = self._item_repo.get_by_id(item_id)
        if not item:
            raise EntityNotFoundException("Manufacturing item", item_id)
        invoice = self.get_invoice(item.manufacturing_invoice_id)
        ensure_warehouse_access(self._db, user, invoice.warehouse_id, write=True)
        if invoice.output_applied:
            raise ValidationException("Inputs cannot change after the output was added to inventory")
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "delete manufacturing item"):
            ledger.reverse_manufacturing_item(item, invoice.warehouse_id)
            self._item_repo.delete(item, commit=False)

    # ── Output ───────────────────────────────────────────────────────────────

    def apply_output(self, invoice_id: int, user: User) -> ManufacturingInvoice:
        invoice = self.get_invoice(invoice_id)
        ensure_warehouse_access(self._db, user, invoice.warehouse_id, write=True)
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "add output material to inventory"):
            ledger.apply_manufacturing_output(invoice)
        return invoice

    # ── Expenses ─────────────────────────────────────────────────────────────

    def list_expenses(self, invoice_id: int, user: User) -> List[ManufacturingExpense]:
        self.get_invoice(invoice_id, user)
        return self._expense_repo.list_for_invoice(invoice_id)

    def create_expense(self, invoice_id: int, data: ManufacturingExpenseCreate, user: User) -> ManufacturingExpense:
        invoice = self.get_invoice(invoice_id)
        ensure_warehouse_access(self._db, user, invoice.warehouse_id, write=True)
        if not self._expense_type_repo.get_by_id(data.expense_type_id):
            raise EntityNotFoundException("Expense type", data.expense_type_id)
        with unit_of_work(self._db, "create manufacturing expense"):
            expense = self._expense_repo.create(
                ManufacturingExpense(manufacturing_invoice_id=invoice.id, **data.model_dump()), commit=False
            )
        return expense

    def delete_expense(self, expense_id: int, user: User) -> None:
        expense = self._expense_repo.get_by_id(expense_id)
        if not expense:
            raise EntityNotFoundException("Expense", expense_id)
        invoice = self.get_invoice(expense.manufacturing_invoice_id)
        ensure_warehouse_access(self._db, user, invoice.warehouse_id, write=True)
        with unit_of_work(self._db, "delete manufacturing expense"):
            self._expense_repo.delete(expense, commit=False)

    # ── Manufacturing run ────────────────────────────────────────────────────

    def create_manufacturing_run(self, run: ManufacturingRunCreate, user: User) -> Tuple[ManufacturingInvoice, List[str]]:
        """Validate, create, consume inputs, add expenses, then add the output.

        Returns the invoice and any warnings. A failed output step leaves the
        inputs consumed and is reported as a warning; every earlier failure
        leaves nothing behind.
        """
        self._check_new_header(run.invoice, user)
        ledger = LedgerService(self._db, user_id=user.id)

        for expense in run.expenses:
            if not self._expense_type_repo.get_by_id(expense.expense_type_id):
                raise EntityNotFoundException("Expense type", expense.expense_type_id)

        shortages = ledger.validate_manufacturing_inputs(run.invoice.warehouse_id, run.items)
        if shortages:
            raise InsufficientStockException(shortages)

        invoice = self.create_invoice(run.invoice, user)
        invoice_id = invoice.id

        try:
            with unit_of_work(self._db, "consume manufacturing inputs"):
                for data in run.items:
                    self._add_item(invoice, data, ledger)
        except FarmLedgerException:
            logger.warning(
                "Manufacturing inputs failed, rolling back invoice",
                extra={"manufacturing_invoice_id": invoice_id},
            )
            self.rollback_invoice(invoice_id)
            raise

        if run.expenses:
            with unit_of_work(self._db, "create manufacturing expenses"):
                for expense in run.expenses:
                    self._expense_repo.create(
                        ManufacturingExpense(manufacturing_invoice_id=invoice.id, **expense.model_dump()),
                        commit=False,
                    )

        warnings: List[str] = []
        try:
            with unit_of_work(self._db, "add output material to inventory"):
                ledger.apply_manufacturing_output(invoice)
        except FarmLedgerException as exc:
            logger.warning(
                "Manufacturing output not applied",
                extra={"manufacturing_invoice_id": invoice.id, "reason": exc.message},
            )
            warnings.append(f"Invoice saved but the output material was not added to inventory: {exc.message}")

        self._db.refresh(invoice)
        return invoice, warnings

    # ── Internals ────────────────────────────────────────────────────────────

    def _check_new_header(self, data: ManufacturingInvoiceCreate, user: User) -> None:
        ensure_warehouse_access(self._db, user, data.warehouse_id, write=True)
        if self._repo.get_by_number(data.invoice_number):
            raise DuplicateEntityException(f"Invoice number {data.invoice_number} already exists")
        if data.material_name_id is not None and not self._material_name_repo.get_by_id(data.material_name_id):
            raise EntityNotFoundException("Material name", data.material_name_id)

    def _add_item(self, invoice: ManufacturingInvoice, data: ManufacturingItemCreate, ledger: LedgerService) -> ManufacturingItem:
        item = self._item_repo.create(
            ManufacturingItem(
                manufacturing_invoice_id=invoice.id,
                material_name_id=data.material_name_id,
                unit_id=data.unit_id,
                quantity=data.quantity,
                blend_count=data.blend_count,
                weight=item_weight(data.quantity, data.blend_count),
            ),
            commit=False,
        )
        ledger.apply_manufacturing_item(item, invoice.warehouse_id)
        return item
