from decimal import Decimal

from farmledger.services.report_service import ReportService


def test_summary_counts_low_and_out_of_stock(db, warehouse, corn, soy, layer_feed, make_material):
    make_material(warehouse, material_name=corn, opening="500")
    make_material(warehouse, material_name=soy, opening="40")
    make_material(warehouse, material_name=layer_feed, opening="0")

    summary = ReportService(db, low_stock_threshold=100).inventory_summary()

    assert summary.total_materials == 3
    assert summary.total_warehouses == 1
    assert summary.low_stock_count == 1
    assert summary.out_of_stock_count == 1
    assert summary.total_current_balance == Decimal("540.00")


def test_summary_of_empty_scope(db):
    summary = ReportService(db).inventory_summary(warehouse_ids=[])

    assert summary.total_materials == 0
    assert summary.total_current_balance == Decimal("0")


def test_aggregated_materials_sum_across_warehouses(db, warehouse, other_warehouse, corn, medicine, unit, make_material):
    make_material(warehouse, material_name=corn, unit=unit, opening="120.25")
    make_material(other_warehouse, material_name=corn, unit=unit, opening="30")
    make_material(warehouse, medicine=medicine, opening="5")

    rows = ReportService(db).aggregated_materials()

    by_key = {row.item_key: row for row in rows}
    assert set(by_key) == {f"material:{corn.id}", f"medicine:{medicine.id}"}
    corn_row = by_key[f"material:{corn.id}"]
    assert corn_row.warehouse_count == 2
    assert corn_row.unit_name == "kg"
    assert corn_row.current_balance == Decimal("150.25")
    medicine_row = by_key[f"medicine:{medicine.id}"]
    assert medicine_row.material_name_id is None
    assert medicine_row.unit_id is None
    assert medicine_row.current_balance == Decimal("5.00")


def test_inventory_report_is_scoped_and_sorted(db, warehouse, other_warehouse, corn, soy, make_material):
    make_material(warehouse, material_name=corn, opening="80")
    make_material(warehouse, material_name=soy, opening="20")
    make_material(other_warehouse, material_name=corn, opening="1")

    rows = ReportService(db).inventory_report(warehouse_ids=[warehouse.id])

    assert [r.material_name for r in rows] == ["Soybean Meal", "Corn"]
    assert rows[0].warehouse_name == "North Store"
    assert rows[0].farm_name == "North Farm"
