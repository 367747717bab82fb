from datetime import date
from decimal import Decimal

import pytest

from farmledger.core.exceptions import (
    EntityNotFoundException,
    InsufficientStockException,
    PermissionDeniedException,
    ValidationException,
)
from farmledger.models.daily_report import DailyReport
from farmledger.models.invoice import Invoice, InvoiceItem
from farmledger.models.material import Material
from farmledger.models.medicine_consumption import MedicineConsumptionInvoice
from farmledger.repositories.catalog_repository import MaterialNameRepository
from farmledger.repositories.material_repository import InventoryMovementRepository, MaterialRepository
from farmledger.schemas.daily_report import DailyReportCreate
from farmledger.services.daily_report_service import DailyReportService, daily_figures
from farmledger.services.ledger_service import SOURCE_DAILY_REPORT, LedgerService


def _report(warehouse, **fields) -> DailyReportCreate:
    fields.setdefault("report_date", date(2026, 10, 12))
    return DailyReportCreate(warehouse_id=warehouse.id, **fields)


def _record(db, warehouse, name: str) -> Material:
    db.expire_all()
    material_name = MaterialNameRepository(db).get_by_name(name)
    return MaterialRepository(db).get_for_item(warehouse.id, material_name_id=material_name.id)


def _counters(record: Material) -> tuple:
    return record.purchases, record.sales, record.consumption, record.current_balance


def test_daily_figures():
    figures = daily_figures(Decimal("180"), Decimal("20"), Decimal("50"), Decimal("5"), Decimal("10"), 250, 3)
    assert figures == {
        "production_eggs": Decimal("200"),
        "production_egg_rate": Decimal("80.00"),
        "current_eggs_balance": Decimal("135"),
        "chicks_after": 247,
    }
    assert daily_figures(Decimal("5"), Decimal("0"), 0, 0, 0, 0, 0)["production_egg_rate"] == Decimal("0")
    with pytest.raises(ValidationException):
        daily_figures(Decimal("0"), Decimal("0"), 0, 0, 0, 10, 11)


def test_create_books_eggs_gift_and_egg_sales(db, admin_user, warehouse, carton):
    service = DailyReportService(db)
    report = service.create_report(
        _report(
            warehouse,
            production_eggs_healthy="180",
            production_eggs_deformed="20",
            eggs_gift="5",
            chicks_before=250,
            egg_sales=[{"items": [{"quantity": "30", "price": "4"}, {"quantity": "20", "price": "4.5"}]}],
        ),
        admin_user,
    )

    assert report.eggs_sold == Decimal("50")
    assert report.production_egg_rate == Decimal("80.00")
    assert report.current_eggs_balance == Decimal("125")

    eggs = _record(db, warehouse, "Eggs")
    assert eggs.unit_id == carton.id
    assert _counters(eggs) == (Decimal("180"), Decimal("50"), Decimal("5"), Decimal("125"))

    invoice = db.query(Invoice).filter(Invoice.daily_report_id == report.id).one()
    assert invoice.invoice_number == f"EGG-SALE-{report.id}-1"
    assert invoice.invoice_type == "sell"
    assert invoice.net_value == Decimal("210")

    movements = InventoryMovementRepository(db).list_filtered(source_type=SOURCE_DAILY_REPORT, source_id=report.id)
    assert [(m.counter, m.quantity) for m in movements] == [("purchases", Decimal("180")), ("consumption", Decimal("5"))]


def test_create_requires_the_carton_unit(db, admin_user, warehouse):
    with pytest.raises(ValidationException):
        DailyReportService(db).create_report(_report(warehouse, production_eggs_healthy="10"), admin_user)
    assert db.query(DailyReport).count() == 0


def test_gift_beyond_stock_rolls_everything_back(db, admin_user, warehouse, carton):
    with pytest.raises(InsufficientStockException):
        DailyReportService(db).create_report(
            _report(warehouse, production_eggs_healthy="3", eggs_gift="5"), admin_user
        )

    assert db.query(DailyReport).count() == 0
    eggs_name = MaterialNameRepository(db).get_by_name("Eggs")
    assert eggs_name is None or MaterialRepository(db).get_for_item(warehouse.id, material_name_id=eggs_name.id) is None


def test_carries_flock_egg_balance_and_monthly_feed(db, admin_user, warehouse, carton):
    service = DailyReportService(db)
    service.create_report(
        _report(warehouse, report_date=date(2026, 9, 30), chicks_before=500, feed_daily_kg="40"), admin_user
    )
    first = service.create_report(
        _report(
            warehouse,
            report_date=date(2026, 10, 1),
            production_eggs_healthy="100",
            chicks_dead=4,
            feed_daily_kg="50",
            previous_eggs_balance="20",
        ),
        admin_user,
    )
    second = service.create_report(
        _report(warehouse, report_date=date(2026, 10, 2), chicks_dead=1, feed_daily_kg="55.5"), admin_user
    )

    assert first.chicks_before == 500
    assert first.chicks_after == 496
    assert second.chicks_before == 496
    assert second.previous_eggs_balance == Decimal("120")
    assert first.feed_monthly_kg == Decimal("50")
    assert second.feed_monthly_kg == Decimal("105.50")


def test_droppings_are_produced_then_sold(db, admin_user, warehouse, carton, unit, supplier):
    report = DailyReportService(db).create_report(
        _report(
            warehouse,
            production_droppings="30",
            droppings_sale={"unit_id": unit.id, "client_id": supplier.id, "quantity": "20", "price": "1.5"},
        ),
        admin_user,
    )

    droppings = _record(db, warehouse, "Droppings")
    assert droppings.unit_id == unit.id
    assert _counters(droppings) == (Decimal("30"), Decimal("20"), Decimal("0"), Decimal("10"))
    invoice = db.query(Invoice).filter(Invoice.invoice_number == f"DROP-SALE-{report.id}").one()
    assert invoice.client_id == supplier.id
    assert invoice.net_value == Decimal("30")


def test_medicine_items_raise_a_consumption_invoice(db, admin_user, warehouse, carton, medicine, make_material):
    record = make_material(warehouse, medicine=medicine, opening="12")
    report = DailyReportService(db).create_report(
        _report(warehouse, medicine_items=[{"medicine_id": medicine.id, "quantity": "2.5", "price": "4"}]),
        admin_user,
    )

    consumption = db.query(MedicineConsumptionInvoice).filter_by(daily_report_id=report.id).one()
    assert consumption.invoice_number == f"MED-CONS-{report.id}"
    assert consumption.total_value == Decimal("10")
    assert consumption.items[0].administration_date == report.report_date
    assert db.get(Material, record.id, populate_existing=True).current_balance == Decimal("9.5")


def test_medicine_missing_from_warehouse_creates_nothing(db, admin_user, warehouse, carton, medicine):
    data = _report(warehouse, production_eggs_healthy="10", medicine_items=[{"medicine_id": medicine.id, "quantity": "1"}])
    with pytest.raises(EntityNotFoundException):
        DailyReportService(db).create_report(data, admin_user)
    assert db.query(DailyReport).count() == 0


def test_delete_reverses_every_booking(db, admin_user, warehouse, carton, medicine, make_material):
    medicine_record = make_material(warehouse, medicine=medicine, opening="12")
    service = DailyReportService(db)
    report = service.create_report(
        _report(
            warehouse,
            production_eggs_healthy="90.5",
            eggs_gift="0.5",
            production_droppings="7",
            droppings_sale={"quantity": "7", "price": "1"},
            egg_sales=[{"items": [{"quantity": "40.25", "price": "3"}]}, {"items": [{"quantity": "10", "price": "3"}]}],
            medicine_items=[{"medicine_id": medicine.id, "quantity": "3"}],
        ),
        admin_user,
    )

    service.delete_report(report.id, admin_user)

    assert db.query(DailyReport).count() == 0
    assert db.query(Invoice).count() == 0
    assert db.query(InvoiceItem).count() == 0
    assert db.query(MedicineConsumptionInvoice).count() == 0
    for name in ("Eggs", "Droppings"):
        record = _record(db, warehouse, name)
        assert record.current_balance == Decimal("0")
        assert record.purchases == record.sales == record.consumption == Decimal("0")
    assert db.get(Material, medicine_record.id, populate_existing=True).current_balance == Decimal("12")


def test_delete_refuses_when_produced_eggs_were_sold_elsewhere(db, admin_user, warehouse, carton):
    service = DailyReportService(db)
    report = service.create_report(_report(warehouse, production_eggs_healthy="10"), admin_user)
    eggs = _record(db, warehouse, "Eggs")

    invoice = Invoice(
        invoice_type="sell", invoice_number="S-EGGS", invoice_date=date(2026, 10, 13), warehouse_id=warehouse.id
    )
    db.add(invoice)
    db.flush()
    item = InvoiceItem(
        invoice_id=invoice.id, material_name_id=eggs.material_name_id, quantity=Decimal("8"), price=0, value=0
    )
    db.add(item)
    db.flush()
    LedgerService(db).apply_invoice_item(item, "sell", warehouse.id)
    db.commit()

    with pytest.raises(InsufficientStockException):
        service.delete_report(report.id, admin_user)
    assert db.get(DailyReport, report.id) is not None
    assert _record(db, warehouse, "Eggs").current_balance == Decimal("2")


def test_farmer_cannot_report_for_another_farm(db, farmer_user, other_warehouse, carton):
    with pytest.raises(PermissionDeniedException):
        DailyReportService(db).create_report(_report(other_warehouse, production_eggs_healthy="1"), farmer_user)
