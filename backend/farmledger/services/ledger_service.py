"""
Inventory Ledger — the only writer of the five stock counters.

Every record keeps ``opening_balance``, ``purchases``, ``sales``,
``consumption`` and ``manufacturing`` plus the derived ``current_balance``.
Each change below is one conditional UPDATE (see
``MaterialRepository.adjust_counter``) followed by an ``InventoryMovement``
row, so two requests racing on the same record cannot both spend the same
stock.

The ledger flushes but never commits; the calling service owns the unit of
work and decides when to commit or roll back.
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from farmledger.core.exceptions import (
    EntityNotFoundException,
    InsufficientStockException,
    ValidationException,
)
from farmledger.models.daily_report import DailyReport
from farmledger.models.inventory_movement import InventoryMovement
from farmledger.models.invoice import INVOICE_TYPE_BUY, INVOICE_TYPE_SELL, InvoiceItem
from farmledger.models.manufacturing import ManufacturingInvoice, ManufacturingItem
from farmledger.models.material import Material
from farmledger.models.medicine_consumption import MedicineConsumptionItem
from farmledger.repositories.catalog_repository import MaterialNameRepository
from farmledger.repositories.manufacturing_repository import ManufacturingItemRepository
from farmledger.repositories.material_repository import (
    OUTBOUND_COUNTERS,
    InventoryMovementRepository,
    MaterialRepository,
)

logger = logging.getLogger(__name__)

SOURCE_INVOICE_ITEM = "invoice_item"
SOURCE_MANUFACTURING_ITEM = "manufacturing_item"
SOURCE_MANUFACTURING_OUTPUT = "manufacturing_output"
SOURCE_MEDICINE_ITEM = "medicine_item"
SOURCE_DAILY_REPORT = "daily_report"

# Counters a daily report may move directly: produced goods and gifted eggs.
DAILY_REPORT_COUNTERS = ("purchases", "consumption")


def to_quantity(value: Any) -> Decimal:
    if value is None:
        raise ValidationException("Quantity is required")
    quantity = value if isinstance(value, Decimal) else Decimal(str(value))
    if quantity <= 0:
        raise ValidationException("Quantity must be greater than zero")
    return quantity


def item_weight(quantity: Any, blend_count: Optional[int]) -> Decimal:
    """Weight of one manufacturing input: quantity times the number of blends."""
    count = blend_count if blend_count else 1
    if count < 1:
        raise ValidationException("Blend count must be at least 1")
    return to_quantity(quantity) * Decimal(count)


class LedgerService:

    def __init__(self, db: Session, user_id: Optional[int] = None):
        self._db = db
        self._user_id = user_id
        self._materials = MaterialRepository(db)
        self._movements = InventoryMovementRepository(db)
        self._material_names = MaterialNameRepository(db)
        self._manufacturing_items = ManufacturingItemRepository(db)

    # ── Invoice items ────────────────────────────────────────────────────────

    def apply_invoice_item(self, item: InvoiceItem, invoice_type: str, warehouse_id: int) -> Material:
        quantity = to_quantity(item.quantity)
        if invoice_type == INVOICE_TYPE_SELL:
            record = self._require_record(warehouse_id, item.material_name_id, item.medicine_id)
            return self._move(record, "sales", quantity, SOURCE_INVOICE_ITEM, item.id)
        if invoice_type == INVOICE_TYPE_BUY:
            record = self._materials.get_or_create_for_item(
                warehouse_id,
                material_name_id=item.material_name_id,
                medicine_id=item.medicine_id,
                unit_id=item.unit_id,
            )
            return self._move(record, "purchases", quantity, SOURCE_INVOICE_ITEM, item.id)
        raise ValidationException(f"Invalid invoice type: {invoice_type}")

    def reverse_invoice_item(self, item: InvoiceItem, invoice_type: str, warehouse_id: int) -> Material:
        quantity = to_quantity(item.quantity)
        record = self._require_record(warehouse_id, item.material_name_id, item.medicine_id)
        if invoice_type == INVOICE_TYPE_SELL:
            return self._move(record, "sales", -quantity, SOURCE_INVOICE_ITEM, item.id)
        if invoice_type == INVOICE_TYPE_BUY:
            return self._move(record, "purchases", -quantity, SOURCE_INVOICE_ITEM, item.id)
        raise ValidationException(f"Invalid invoice type: {invoice_type}")

    def adjust_invoice_item(
        self,
        item: InvoiceItem,
        invoice_type: str,
        warehouse_id: int,
        old_quantity: Decimal,
    ) -> Optional[Material]:
        """Apply only the difference between ``old_quantity`` and the item's quantity."""
        delta = to_quantity(item.quantity) - to_quantity(old_quantity)
        if delta == 0:
            return None
        if invoice_type == INVOICE_TYPE_SELL:
            counter = "sales"
        elif invoice_type == INVOICE_TYPE_BUY:
            counter = "purchases"
        else:
            raise ValidationException(f"Invalid invoice type: {invoice_type}")
        record = self._require_record(warehouse_id, item.material_name_id, item.medicine_id)
        return self._move(record, counter, delta, SOURCE_INVOICE_ITEM, item.id)

    # ── Manufacturing inputs ─────────────────────────────────────────────────

    def validate_manufacturing_inputs(self, warehouse_id: int, items: Iterable[Any]) -> List[Dict[str, Any]]:
        """Return every input whose balance cannot cover the requested quantity.

        Repeated materials are summed before comparing; a material with no
        record in the warehouse is reported with ``available = 0``.
        """
        required: "OrderedDict[int, Decimal]" = OrderedDict()
        for item in items:
            quantity = to_quantity(item.quantity)
            required[item.material_name_id] = required.get(item.material_name_id, Decimal("0")) + quantity

        shortages = []
        for material_name_id, quantity in required.items():
            record = self._materials.get_for_item(warehouse_id, material_name_id=material_name_id)
            available = Decimal(record.current_balance) if record is not None else Decimal("0")
            if available < quantity:
                shortages.append(
                    {
                        "material_name": self._material_label(record, material_name_id),
                        "available": available,
                        "required": quantity,
                    }
                )
        return shortages

    def apply_manufacturing_item(self, item: ManufacturingItem, warehouse_id: int) -> Material:
        quantity = to_quantity(item.quantity)
        record = self._require_record(warehouse_id, material_name_id=item.material_name_id)
        return self._move(record, "consumption", quantity, SOURCE_MANUFACTURING_ITEM, item.id)

    def reverse_manufacturing_item(self, item: ManufacturingItem, warehouse_id: int) -> Material:
        quantity = to_quantity(item.quantity)
        record = self._require_record(warehouse_id, material_name_id=item.material_name_id)
        return self._move(record, "consumption", -quantity, SOURCE_MANUFACTURING_ITEM, item.id)

    # ── Manufacturing output ─────────────────────────────────────────────────

    def apply_manufacturing_output(self, invoice: ManufacturingInvoice) -> Material:
        if invoice.output_applied:
            raise ValidationException("Output material has already been added to inventory")
        items = self._manufacturing_items.list_for_invoice(invoice.id)
        output_quantity = sum((item_weight(i.quantity, i.blend_count) for i in items), Decimal("0"))
        if not invoice.material_name_id or not invoice.unit_id or output_quantity <= 0:
            raise ValidationException("Output material, unit and quantity are required")

        record = self._materials.get_or_create_for_item(
            invoice.warehouse_id,
            material_name_id=invoice.material_name_id,
            unit_id=invoice.unit_id,
        )
        updated = self._move(record, "manufacturing", output_quantity, SOURCE_MANUFACTURING_OUTPUT, invoice.id)
        invoice.quantity = output_quantity
        invoice.output_applied = True
        self._db.flush()
        return updated

    def reverse_manufacturing_output(self, invoice: ManufacturingInvoice) -> Optional[Material]:
        if not invoice.output_applied:
            return None
        quantity = to_quantity(invoice.quantity)
        record = self._require_record(invoice.warehouse_id, material_name_id=invoice.material_name_id)
        updated = self._move(record, "manufacturing", -quantity, SOURCE_MANUFACTURING_OUTPUT, invoice.id)
        invoice.output_applied = False
        self._db.flush()
        return updated

    # ── Medicine consumption ─────────────────────────────────────────────────

    def apply_medicine_consumption(self, item: MedicineConsumptionItem, warehouse_id: int) -> Material:
        quantity = to_quantity(item.quantity)
        record = self._require_record(warehouse_id, medicine_id=item.medicine_id)
        return self._move(record, "consumption", quantity, SOURCE_MEDICINE_ITEM, item.id)

    def reverse_medicine_consumption(self, item: MedicineConsumptionItem, warehouse_id: int) -> Material:
        quantity = to_quantity(item.quantity)
        record = self._require_record(warehouse_id, medicine_id=item.medicine_id)
        return self._move(record, "consumption", -quantity, SOURCE_MEDICINE_ITEM, item.id)

    # ── Daily production ─────────────────────────────────────────────────────

    def apply_daily_report(
        self,
        report: DailyReport,
        material_name_id: int,
        counter: str,
        quantity: Any,
        unit_id: Optional[int] = None,
    ) -> Material:
        """Book produced goods as ``purchases`` or gifted goods as ``consumption``.

        Production registers the warehouse record when it is missing; a gift
        needs the stock to be there already.
        """
        quantity = to_quantity(quantity)
        if counter == "purchases":
            record = self._materials.get_or_create_for_item(
                report.warehouse_id, material_name_id=material_name_id, unit_id=unit_id
            )
        elif counter in DAILY_REPORT_COUNTERS:
            record = self._require_record(report.warehouse_id, material_name_id=material_name_id)
        else:
            raise ValidationException(f"Daily reports cannot move {counter}")
        return self._move(record, counter, quantity, SOURCE_DAILY_REPORT, report.id)

    def reverse_daily_report(self, report: DailyReport) -> List[Material]:
        """Undo every counter change booked under ``report``, gifts before production.

        Amounts are netted from the report's movement trail.
        """
        net: "OrderedDict[tuple, Decimal]" = OrderedDict()
        for movement in self._movements.list_filtered(source_type=SOURCE_DAILY_REPORT, source_id=report.id):
            key = (movement.material_id, movement.counter)
            net[key] = net.get(key, Decimal("0")) + Decimal(movement.quantity)

        ordered = sorted(net.items(), key=lambda entry: DAILY_REPORT_COUNTERS.index(entry[0][1]), reverse=True)
        reversed_records = []
        for (material_id, counter), quantity in ordered:
            if quantity == 0:
                continue
            record = self._db.get(Material, material_id)
            if record is None:
                raise EntityNotFoundException("Material in warehouse inventory", material_id)
            reversed_records.append(self._move(record, counter, -quantity, SOURCE_DAILY_REPORT, report.id))
        return reversed_records

    # ── Internals ────────────────────────────────────────────────────────────

    def _require_record(
        self,
        warehouse_id: int,
        material_name_id: Optional[int] = None,
        medicine_id: Optional[int] = None,
    ) -> Material:
        if material_name_id is None and medicine_id is None:
            raise ValidationException("Either a material or a medicine is required")
        record = self._materials.get_for_item(warehouse_id, material_name_id, medicine_id)
        if record is None:
            raise EntityNotFoundException("Material in warehouse inventory")
        return record

    def _move(
        self,
        record: Material,
        counter: str,
        delta: Decimal,
        source_type: str,
        source_id: Optional[int],
    ) -> Material:
        updated = self._materials.adjust_counter(record.id, counter, delta)
        if updated is None:
            raise self._shortage(record, counter, delta)

        self._movements.create(
            InventoryMovement(
                material_id=updated.id,
                counter=counter,
                quantity=delta,
                balance_after=updated.current_balance,
                source_type=source_type,
                source_id=source_id,
                user_id=self._user_id,
            ),
            commit=False,
        )
        logger.info(
            "Inventory %s %s by %s",
            counter,
            "increased" if delta > 0 else "decreased",
            abs(delta),
            extra={
                "material_id": updated.id,
                "warehouse_id": updated.warehouse_id,
                "counter": counter,
                "delta": delta,
                "balance_after": updated.current_balance,
                "source_type": source_type,
                "source_id": source_id,
                "user_id": self._user_id,
            },
        )
        return updated

    def _shortage(self, record: Material, counter: str, delta: Decimal) -> InsufficientStockException:
        fresh = self._db.get(Material, record.id, populate_existing=True)
        required = abs(delta)
        balance = Decimal(fresh.current_balance)
        counter_value = Decimal(getattr(fresh, counter))
        if delta > 0:
            available = balance
        elif counter in OUTBOUND_COUNTERS:
            available = counter_value
        else:
            # Taking back purchases or output is bounded by both values.
            available = min(balance, counter_value)
        logger.warning(
            "Insufficient stock for material %s",
            fresh.id,
            extra={"material_id": fresh.id, "counter": counter, "available": available, "required": required},
        )
        return InsufficientStockException(
            [{"material_name": fresh.display_name, "available": available, "required": required}]
        )

    def _material_label(self, record: Optional[Material], material_name_id: int) -> str:
        if record is not None:
            return record.display_name
        name = self._material_names.get_by_id(material_name_id)
        return name.material_name if name is not None else str(material_name_id)
