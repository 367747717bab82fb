from datetime import date
from decimal import Decimal

import pytest

from farmledger.core.exceptions import (
    FarmLedgerException,
    InsufficientStockException,
    PermissionDeniedException,
    ValidationException,
)
from farmledger.models.manufacturing import ManufacturingInvoice
from farmledger.models.material import Material
from farmledger.repositories.material_repository import MaterialRepository
from farmledger.schemas.manufacturing import (
    ManufacturingExpenseCreate,
    ManufacturingInvoiceCreate,
    ManufacturingItemCreate,
    ManufacturingRunCreate,
)
from farmledger.services.manufacturing_service import ManufacturingService


def _run(warehouse, output=None, unit=None, items=(), expenses=(), number="MF-100") -> ManufacturingRunCreate:
    return ManufacturingRunCreate(
        invoice=ManufacturingInvoiceCreate(
            invoice_number=number,
            warehouse_id=warehouse.id,
            blend_name="Starter",
            material_name_id=output.id if output is not None else None,
            unit_id=unit.id if unit is not None else None,
            manufacturing_date=date(2026, 10, 5),
        ),
        items=[ManufacturingItemCreate(**i) for i in items],
        expenses=[ManufacturingExpenseCreate(**e) for e in expenses],
    )


def _balance(db, record: Material) -> Decimal:
    return db.get(Material, record.id, populate_existing=True).current_balance


def test_run_consumes_inputs_and_adds_output(
    db, admin_user, warehouse, corn, soy, layer_feed, unit, expense_type, make_material
):
    corn_record = make_material(warehouse, material_name=corn, opening="100")
    soy_record = make_material(warehouse, material_name=soy, opening="50")
    run = _run(
        warehouse,
        output=layer_feed,
        unit=unit,
        items=[
            {"material_name_id": corn.id, "quantity": "5", "blend_count": 2},
            {"material_name_id": soy.id, "quantity": "3", "blend_count": 2},
        ],
        expenses=[{"expense_type_id": expense_type.id, "amount": "12.50"}],
    )

    invoice, warnings = ManufacturingService(db).create_manufacturing_run(run, admin_user)

    assert warnings == []
    assert invoice.output_applied is True
    assert invoice.quantity == Decimal("16")
    assert [i.weight for i in invoice.items] == [Decimal("10"), Decimal("6")]
    assert len(invoice.expenses) == 1
    assert _balance(db, corn_record) == Decimal("95")
    assert _balance(db, soy_record) == Decimal("47")
    output = MaterialRepository(db).get_for_item(warehouse.id, material_name_id=layer_feed.id)
    assert output.manufacturing == Decimal("16")
    assert output.unit_id == unit.id


def test_run_with_short_input_creates_nothing(db, admin_user, warehouse, corn, layer_feed, unit, make_material):
    corn_record = make_material(warehouse, material_name=corn, opening="4")
    run = _run(warehouse, output=layer_feed, unit=unit, items=[{"material_name_id": corn.id, "quantity": "5"}])

    with pytest.raises(InsufficientStockException) as exc_info:
        ManufacturingService(db).create_manufacturing_run(run, admin_user)

    assert exc_info.value.shortages == [
        {"material_name": "Corn", "available": Decimal("4"), "required": Decimal("5")}
    ]
    assert db.query(ManufacturingInvoice).count() == 0
    assert _balance(db, corn_record) == Decimal("4")


def test_run_failing_mid_inputs_rolls_back_the_invoice(db, admin_user, warehouse, corn, layer_feed, unit, make_material):
    corn_record = make_material(warehouse, material_name=corn, opening="100")
    run = _run(
        warehouse,
        output=layer_feed,
        unit=unit,
        items=[
            {"material_name_id": corn.id, "quantity": "5"},
            # Unknown unit id violates the foreign key on insert.
            {"material_name_id": corn.id, "quantity": "5", "unit_id": 9999},
        ],
    )

    with pytest.raises(FarmLedgerException):
        ManufacturingService(db).create_manufacturing_run(run, admin_user)

    assert db.query(ManufacturingInvoice).count() == 0
    assert _balance(db, corn_record) == Decimal("100")


def test_run_without_output_material_keeps_inputs_and_warns(db, admin_user, warehouse, corn, make_material):
    corn_record = make_material(warehouse, material_name=corn, opening="100")
    run = _run(warehouse, items=[{"material_name_id": corn.id, "quantity": "10"}])

    invoice, warnings = ManufacturingService(db).create_manufacturing_run(run, admin_user)

    assert len(warnings) == 1
    assert "not added to inventory" in warnings[0]
    assert invoice.output_applied is False
    assert _balance(db, corn_record) == Decimal("90")


def test_rollback_deletes_header_without_touching_balances(
    db, admin_user, warehouse, corn, layer_feed, unit, make_material
):
    corn_record = make_material(warehouse, material_name=corn, opening="100")
    service = ManufacturingService(db)
    invoice, _ = service.create_manufacturing_run(
        _run(warehouse, output=layer_feed, unit=unit, items=[{"material_name_id": corn.id, "quantity": "10"}]),
        admin_user,
    )

    service.rollback_invoice(invoice.id)

    assert db.query(ManufacturingInvoice).count() == 0
    assert _balance(db, corn_record) == Decimal("90")


def test_delete_reverses_output_and_inputs(db, admin_user, warehouse, corn, layer_feed, unit, make_material):
    corn_record = make_material(warehouse, material_name=corn, opening="100")
    service = ManufacturingService(db)
    invoice, _ = service.create_manufacturing_run(
        _run(
            warehouse,
            output=layer_feed,
            unit=unit,
            items=[{"material_name_id": corn.id, "quantity": "10", "blend_count": 3}],
        ),
        admin_user,
    )
    output = MaterialRepository(db).get_for_item(warehouse.id, material_name_id=layer_feed.id)
    assert output.current_balance == Decimal("30")

    service.delete_invoice(invoice.id, admin_user)

    assert _balance(db, corn_record) == Decimal("100")
    assert _balance(db, output) == Decimal("0")


def test_delete_is_refused_once_output_was_sold(db, admin_user, warehouse, corn, layer_feed, unit, make_material):
    make_material(warehouse, material_name=corn, opening="100")
    service = ManufacturingService(db)
    invoice, _ = service.create_manufacturing_run(
        _run(warehouse, output=layer_feed, unit=unit, items=[{"material_name_id": corn.id, "quantity": "10"}]),
        admin_user,
    )
    repo = MaterialRepository(db)
    output = repo.get_for_item(warehouse.id, material_name_id=layer_feed.id)
    repo.adjust_counter(output.id, "sales", Decimal("8"))
    db.commit()

    with pytest.raises(InsufficientStockException):
        service.delete_invoice(invoice.id, admin_user)
    assert db.get(ManufacturingInvoice, invoice.id) is not None


def test_items_are_locked_after_output(db, admin_user, warehouse, corn, layer_feed, unit, make_material):
    make_material(warehouse, material_name=corn, opening="100")
    service = ManufacturingService(db)
    invoice, _ = service.create_manufacturing_run(
        _run(warehouse, output=layer_feed, unit=unit, items=[{"material_name_id": corn.id, "quantity": "10"}]),
        admin_user,
    )

    with pytest.raises(ValidationException):
        service.create_item(invoice.id, ManufacturingItemCreate(material_name_id=corn.id, quantity=Decimal("1")), admin_user)


def test_farmer_cannot_manufacture_in_another_farm(db, farmer_user, other_warehouse, corn):
    run = _run(other_warehouse, items=[{"material_name_id": corn.id, "quantity": "1"}])
    with pytest.raises(PermissionDeniedException):
        ManufacturingService(db).create_manufacturing_run(run, farmer_user)
