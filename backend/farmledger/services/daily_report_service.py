"""
Daily Report Service — a warehouse's daily egg, flock and feed figures.

Creating a report also books what the day moved through the ledger: healthy
eggs (and droppings) as production, gifted eggs as consumption, the egg and
droppings sale invoices, and one medicine consumption invoice. Deleting the
report reverses all of it. Both happen in a single unit of work.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from farmledger.config import settings
from farmledger.core.access import ensure_warehouse_access, owned_warehouse_ids
from farmledger.core.exceptions import EntityNotFoundException, ValidationException
from farmledger.models.catalog import MaterialName
from farmledger.models.daily_report import DailyReport
from farmledger.models.invoice import INVOICE_TYPE_SELL, Invoice, InvoiceItem
from farmledger.models.medicine_consumption import MedicineConsumptionInvoice, MedicineConsumptionItem
from farmledger.models.user import User
from farmledger.repositories.catalog_repository import (
    ClientRepository,
    MaterialNameRepository,
    MeasurementUnitRepository,
    MedicineRepository,
)
from farmledger.repositories.daily_report_repository import DailyReportRepository
from farmledger.repositories.invoice_repository import InvoiceItemRepository, InvoiceRepository
from farmledger.repositories.material_repository import MaterialRepository
from farmledger.repositories.medicine_consumption_repository import (
    MedicineConsumptionItemRepository,
    MedicineConsumptionRepository,
)
from farmledger.schemas.daily_report import DailyReportCreate, DailyReportUpdate
from farmledger.services.invoice_service import CENT, line_value
from farmledger.services.ledger_service import LedgerService
from farmledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def daily_figures(
    healthy: Decimal,
    deformed: Decimal,
    sold: Decimal,
    gift: Decimal,
    previous_balance: Decimal,
    chicks_before: int,
    chicks_dead: int,
) -> Dict[str, Any]:
    """Production total and lay rate, closing egg balance and surviving flock."""
    if chicks_dead > chicks_before:
        raise ValidationException(f"Dead chicks ({chicks_dead}) exceed the flock ({chicks_before})")
    production = healthy + deformed
    rate = (production / Decimal(chicks_before) * 100).quantize(CENT) if chicks_before > 0 else ZERO
    return {
        "production_eggs": production,
        "production_egg_rate": rate,
        "current_eggs_balance": previous_balance + healthy - sold - gift,
        "chicks_after": chicks_before - chicks_dead,
    }


class DailyReportService:

    def __init__(self, db: Session):
        self._db = db
        self._repo = DailyReportRepository(db)
        self._invoice_repo = InvoiceRepository(db)
        self._invoice_item_repo = InvoiceItemRepository(db)
        self._consumption_repo = MedicineConsumptionRepository(db)
        self._consumption_item_repo = MedicineConsumptionItemRepository(db)
        self._materials = MaterialRepository(db)
        self._material_names = MaterialNameRepository(db)
        self._units = MeasurementUnitRepository(db)
        self._medicines = MedicineRepository(db)
        self._clients = ClientRepository(db)

    def list_reports(
        self,
        user: User,
        warehouse_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[DailyReport]:
        if warehouse_id is not None:
            ensure_warehouse_access(self._db, user, warehouse_id)
        return self._repo.list_filtered(
            warehouse_ids=owned_warehouse_ids(self._db, user),
            warehouse_id=warehouse_id,
            date_from=date_from,
            date_to=date_to,
        )

    def get_report(self, report_id: int, user: User, write: bool = False) -> DailyReport:
        report = self._repo.get_by_id(report_id)
        if not report:
            raise EntityNotFoundException("Daily report", report_id)
        ensure_warehouse_access(self._db, user, report.warehouse_id, write=write)
        return report

    def create_report(self, data: DailyReportCreate, user: User) -> DailyReport:
        ensure_warehouse_access(self._db, user, data.warehouse_id, write=True)
        carton = self._units.get_by_name(settings.EGG_UNIT_NAME)
        if carton is None:
            raise ValidationException(f"Measurement unit '{settings.EGG_UNIT_NAME}' is not registered")
        self._check_references(data)

        last = self._repo.latest_for_warehouse(data.warehouse_id)
        chicks_before = data.chicks_before
        if chicks_before is None:
            chicks_before = last.chicks_after if last is not None else 0
        previous_balance = data.previous_eggs_balance
        if previous_balance is None:
            previous_balance = Decimal(last.current_eggs_balance) if last is not None else ZERO
        eggs_sold = data.eggs_sold
        if eggs_sold is None:
            eggs_sold = sum((i.quantity for sale in data.egg_sales for i in sale.items), ZERO)

        figures = daily_figures(
            data.production_eggs_healthy,
            data.production_eggs_deformed,
            eggs_sold,
            data.eggs_gift,
            previous_balance,
            chicks_before,
            data.chicks_dead,
        )
        feed_monthly = self._repo.sum_feed_for_month(data.warehouse_id, data.report_date) + data.feed_daily_kg
        fields = data.model_dump(exclude={"egg_sales", "droppings_sale", "medicine_items"})
        fields.update(
            figures,
            chicks_before=chicks_before,
            previous_eggs_balance=previous_balance,
            eggs_sold=eggs_sold,
            feed_monthly_kg=feed_monthly.quantize(CENT),
        )
        ledger = LedgerService(self._db, user_id=user.id)

        with unit_of_work(self._db, "create daily report"):
            report = self._repo.create(DailyReport(**fields, created_by=user.id), commit=False)

            eggs = self._material_name(settings.EGG_MATERIAL_NAME)
            self._materials.get_or_create_for_item(report.warehouse_id, material_name_id=eggs.id, unit_id=carton.id)
            if data.production_eggs_healthy > 0:
                ledger.apply_daily_report(report, eggs.id, "purchases", data.production_eggs_healthy, carton.id)
            if data.eggs_gift > 0:
                ledger.apply_daily_report(report, eggs.id, "consumption", data.eggs_gift)

            for number, sale in enumerate(data.egg_sales, start=1):
                lines = [(eggs.id, i.unit_id or carton.id, i.egg_weight, i.quantity, i.price) for i in sale.items]
                self._raise_sale(report, f"EGG-SALE-{report.id}-{number}", sale.client_id, lines, ledger)

            if data.production_droppings > 0 or data.droppings_sale is not None:
                droppings = self._material_name(settings.DROPPINGS_MATERIAL_NAME)
                sale = data.droppings_sale
                unit_id = sale.unit_id if sale is not None else None
                if data.production_droppings > 0:
                    ledger.apply_daily_report(report, droppings.id, "purchases", data.production_droppings, unit_id)
                if sale is not None:
                    lines = [(droppings.id, unit_id, None, sale.quantity, sale.price)]
                    self._raise_sale(report, f"DROP-SALE-{report.id}", sale.client_id, lines, ledger)

            if data.medicine_items:
                self._raise_medicine_consumption(report, data, ledger)

        logger.info(
            "Daily report created",
            extra={
                "daily_report_id": report.id,
                "warehouse_id": report.warehouse_id,
                "egg_sales": len(data.egg_sales),
                "medicine_items": len(data.medicine_items),
                "user_id": user.id,
            },
        )
        return report

    def update_report(self, report_id: int, data: DailyReportUpdate, user: User) -> DailyReport:
        """Only figures that do not move stock can change after creation."""
        report = self.get_report(report_id, user, write=True)
        updates = data.model_dump(exclude_unset=True)
        if "chicks_dead" in updates:
            if updates["chicks_dead"] > report.chicks_before:
                raise ValidationException(
                    f"Dead chicks ({updates['chicks_dead']}) exceed the flock ({report.chicks_before})"
                )
            updates["chicks_after"] = report.chicks_before - updates["chicks_dead"]
        with unit_of_work(self._db, "update daily report"):
            self._repo.update(report, updates, commit=False)
        return report

    def toggle_checked(self, report_id: int) -> DailyReport:
        report = self._repo.get_by_id(report_id)
        if not report:
            raise EntityNotFoundException("Daily report", report_id)
        with unit_of_work(self._db, "toggle daily report"):
            self._repo.update(report, {"checked": not report.checked}, commit=False)
        return report

    def delete_report(self, report_id: int, user: User) -> None:
        """Reverse the report's invoices and stock bookings, then delete it.

        Fails with InsufficientStock when produced eggs or droppings have
        since been sold or consumed elsewhere.
        """
        report = self.get_report(report_id, user, write=True)
        ledger = LedgerService(self._db, user_id=user.id)
        sale_invoices = list(report.sale_invoices)
        medicine_invoices = list(report.medicine_invoices)

        with unit_of_work(self._db, "delete daily report"):
            for invoice in sale_invoices:
                for item in self._invoice_item_repo.list_for_invoice(invoice.id):
                    ledger.reverse_invoice_item(item, invoice.invoice_type, invoice.warehouse_id)
                self._invoice_repo.delete(invoice, commit=False)
            for consumption in medicine_invoices:
                for item in list(consumption.items):
                    ledger.reverse_medicine_consumption(item, consumption.warehouse_id)
                self._consumption_repo.delete(consumption, commit=False)
            # The linked invoices are gone; drop the stale collections.
            self._db.expire(report, ["sale_invoices", "medicine_invoices"])
            ledger.reverse_daily_report(report)
            self._repo.delete(report, commit=False)
        logger.info(
            "Daily report deleted",
            extra={
                "daily_report_id": report_id,
                "invoices_removed": len(sale_invoices) + len(medicine_invoices),
                "user_id": user.id,
            },
        )

    # ── Internals ────────────────────────────────────────────────────────────

    def _check_references(self, data: DailyReportCreate) -> None:
        client_ids = [s.client_id for s in data.egg_sales if s.client_id is not None]
        unit_ids = [i.unit_id for s in data.egg_sales for i in s.items if i.unit_id is not None]
        unit_ids += [i.unit_id for i in data.medicine_items if i.unit_id is not None]
        if data.droppings_sale is not None:
            if data.droppings_sale.client_id is not None:
                client_ids.append(data.droppings_sale.client_id)
            if data.droppings_sale.unit_id is not None:
                unit_ids.append(data.droppings_sale.unit_id)

        for client_id in client_ids:
            if not self._clients.get_by_id(client_id):
                raise EntityNotFoundException("Client", client_id)
        for unit_id in unit_ids:
            if not self._units.get_by_id(unit_id):
                raise EntityNotFoundException("Unit", unit_id)
        for item in data.medicine_items:
            if not self._medicines.get_by_id(item.medicine_id):
                raise EntityNotFoundException("Medicine", item.medicine_id)

    def _material_name(self, name: str) -> MaterialName:
        existing = self._material_names.get_by_name(name)
        if existing is not None:
            return existing
        return self._material_names.create(MaterialName(material_name=name), commit=False)

    def _raise_sale(
        self,
        report: DailyReport,
        invoice_number: str,
        client_id: Optional[int],
        lines: List[tuple],
        ledger: LedgerService,
    ) -> Invoice:
        invoice = self._invoice_repo.create(
            Invoice(
                invoice_type=INVOICE_TYPE_SELL,
                invoice_number=invoice_number,
                invoice_date=report.report_date,
                invoice_time=report.report_time,
                warehouse_id=report.warehouse_id,
                client_id=client_id,
                daily_report_id=report.id,
                created_by=report.created_by,
            ),
            commit=False,
        )
        total = ZERO
        for material_name_id, unit_id, egg_weight, quantity, price in lines:
            item = self._invoice_item_repo.create(
                InvoiceItem(
                    invoice_id=invoice.id,
                    material_name_id=material_name_id,
                    unit_id=unit_id,
                    egg_weight=egg_weight,
                    quantity=quantity,
                    price=price,
                    value=line_value(quantity, price),
                ),
                commit=False,
            )
            ledger.apply_invoice_item(item, INVOICE_TYPE_SELL, report.warehouse_id)
            total += item.value
        invoice.total_items_value = total
        invoice.total_expenses_value = ZERO
        invoice.net_value = total
        self._db.flush()
        return invoice

    def _raise_medicine_consumption(
        self, report: DailyReport, data: DailyReportCreate, ledger: LedgerService
    ) -> MedicineConsumptionInvoice:
        consumption = self._consumption_repo.create(
            MedicineConsumptionInvoice(
                invoice_number=f"MED-CONS-{report.id}",
                warehouse_id=report.warehouse_id,
                invoice_date=report.report_date,
                notes=report.notes,
                daily_report_id=report.id,
                created_by=report.created_by,
            ),
            commit=False,
        )
        total = ZERO
        for line in data.medicine_items:
            item = self._consumption_item_repo.create(
                MedicineConsumptionItem(
                    consumption_invoice_id=consumption.id,
                    medicine_id=line.medicine_id,
                    unit_id=line.unit_id,
                    administration_date=report.report_date,
                    quantity=line.quantity,
                    price=line.price,
                    value=line_value(line.quantity, line.price),
                ),
                commit=False,
            )
            ledger.apply_medicine_consumption(item, report.warehouse_id)
            total += item.value
        consumption.total_value = total.quantize(CENT)
        self._db.flush()
        return consumption
