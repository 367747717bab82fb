"""
Integration Tests — Materials & Inventory Reports

Tests:
- GET/POST/PUT/DELETE /api/v1/materials
- Balance lookup, movements, summary and aggregated totals
- /api/v1/reports/inventory scope
"""
from fastapi.testclient import TestClient


class TestMaterialCRUD:

    def test_create_material_sets_balance_from_opening(self, client: TestClient, admin_headers, warehouse, corn, unit):
        resp = client.post("/api/v1/materials", headers=admin_headers, json={
            "warehouse_id": warehouse.id,
            "material_name_id": corn.id,
            "unit_id": unit.id,
            "opening_balance": "250",
        })
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        assert data["display_name"] == "Corn"
        assert float(data["opening_balance"]) == 250.0
        assert float(data["current_balance"]) == 250.0

    def test_duplicate_material_in_warehouse(self, client: TestClient, admin_headers, warehouse, corn, make_material):
        make_material(warehouse, material_name=corn, opening="1")
        resp = client.post("/api/v1/materials", headers=admin_headers, json={
            "warehouse_id": warehouse.id,
            "material_name_id": corn.id,
        })
        assert resp.status_code == 409
        assert resp.json()["error"] == "This material already exists in the warehouse"

    def test_negative_opening_balance_is_rejected(self, client: TestClient, admin_headers, warehouse, corn):
        resp = client.post("/api/v1/materials", headers=admin_headers, json={
            "warehouse_id": warehouse.id,
            "material_name_id": corn.id,
            "opening_balance": "-5",
        })
        assert resp.status_code == 422

    def test_correction_recomputes_balance(self, client: TestClient, admin_headers, warehouse, corn, make_material):
        record = make_material(warehouse, material_name=corn, opening="100")
        resp = client.put(f"/api/v1/materials/{record.id}", headers=admin_headers, json={
            "purchases": "20",
            "sales": "50",
        })
        assert resp.status_code == 200
        assert float(resp.json()["data"]["current_balance"]) == 70.0

    def test_correction_cannot_make_balance_negative(self, client: TestClient, admin_headers, warehouse, corn, make_material):
        record = make_material(warehouse, material_name=corn, opening="10")
        resp = client.put(f"/api/v1/materials/{record.id}", headers=admin_headers, json={"sales": "11"})
        assert resp.status_code == 400

    def test_delete_material(self, client: TestClient, admin_headers, warehouse, corn, make_material):
        record = make_material(warehouse, material_name=corn, opening="10")
        assert client.delete(f"/api/v1/materials/{record.id}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/v1/materials/{record.id}", headers=admin_headers).status_code == 404

    def test_list_sorted_by_balance(self, client: TestClient, admin_headers, warehouse, corn, soy, make_material):
        make_material(warehouse, material_name=corn, opening="90")
        make_material(warehouse, material_name=soy, opening="5")
        resp = client.get(f"/api/v1/materials?warehouse_id={warehouse.id}", headers=admin_headers)
        assert resp.status_code == 200
        assert [m["display_name"] for m in resp.json()["data"]] == ["Soybean Meal", "Corn"]


class TestMaterialLookups:

    def test_balance_of_registered_material(self, client: TestClient, admin_headers, warehouse, corn, unit, make_material):
        make_material(warehouse, material_name=corn, unit=unit, opening="12.5")
        resp = client.get(
            f"/api/v1/materials/balance?warehouse_id={warehouse.id}&material_name_id={corn.id}",
            headers=admin_headers,
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert float(data["balance"]) == 12.5
        assert data["unit_name"] == "kg"

    def test_balance_of_absent_material_is_zero(self, client: TestClient, admin_headers, warehouse, medicine):
        resp = client.get(
            f"/api/v1/materials/balance?warehouse_id={warehouse.id}&medicine_id={medicine.id}",
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert float(resp.json()["data"]["balance"]) == 0.0
        assert resp.json()["data"]["unit_name"] == ""

    def test_farmer_cannot_read_another_warehouse_balance(self, client: TestClient, farmer_headers, other_warehouse, corn):
        resp = client.get(
            f"/api/v1/materials/balance?warehouse_id={other_warehouse.id}&material_name_id={corn.id}",
            headers=farmer_headers,
        )
        assert resp.status_code == 403

    def test_movements_trace_invoice_items(self, client: TestClient, admin_headers, warehouse, corn, make_material):
        record = make_material(warehouse, material_name=corn, opening="50")
        invoice = client.post("/api/v1/invoices", headers=admin_headers, json={
            "invoice_type": "sell",
            "invoice_number": "S-TRACE",
            "invoice_date": "2026-10-10",
            "warehouse_id": warehouse.id,
        }).json()["data"]
        client.post(f"/api/v1/invoices/{invoice['id']}/items", headers=admin_headers, json={
            "material_name_id": corn.id,
            "quantity": "7",
        })

        resp = client.get(f"/api/v1/materials/{record.id}/movements", headers=admin_headers)
        assert resp.status_code == 200
        movements = resp.json()["data"]
        assert len(movements) == 1
        assert movements[0]["counter"] == "sales"
        assert float(movements[0]["quantity"]) == 7.0
        assert float(movements[0]["balance_after"]) == 43.0
        assert movements[0]["source_type"] == "invoice_item"

    def test_farmer_sees_only_own_materials(
        self, client: TestClient, farmer_headers, warehouse, other_warehouse, corn, soy, make_material
    ):
        make_material(warehouse, material_name=corn, opening="1")
        make_material(other_warehouse, material_name=soy, opening="1")
        resp = client.get("/api/v1/materials", headers=farmer_headers)
        assert resp.status_code == 200
        assert [m["display_name"] for m in resp.json()["data"]] == ["Corn"]


class TestInventoryReports:

    def test_summary(self, client: TestClient, admin_headers, warehouse, corn, soy, make_material):
        make_material(warehouse, material_name=corn, opening="0")
        make_material(warehouse, material_name=soy, opening="30")
        resp = client.get("/api/v1/materials/summary", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total_materials"] == 2
        assert data["out_of_stock_count"] == 1
        assert data["low_stock_count"] == 1

    def test_aggregated_totals(self, client: TestClient, admin_headers, warehouse, other_warehouse, corn, make_material):
        make_material(warehouse, material_name=corn, opening="10")
        make_material(other_warehouse, material_name=corn, opening="15")
        resp = client.get("/api/v1/materials/aggregated", headers=admin_headers)
        assert resp.status_code == 200
        rows = resp.json()["data"]
        assert len(rows) == 1
        assert rows[0]["warehouse_count"] == 2
        assert float(rows[0]["current_balance"]) == 25.0

    def test_inventory_report_for_farmer(
        self, client: TestClient, farmer_headers, warehouse, other_warehouse, corn, make_material
    ):
        make_material(warehouse, material_name=corn, opening="10")
        make_material(other_warehouse, material_name=corn, opening="15")
        resp = client.get("/api/v1/reports/inventory", headers=farmer_headers)
        assert resp.status_code == 200
        rows = resp.json()["data"]
        assert len(rows) == 1
        assert rows[0]["warehouse_name"] == "North Store"

        denied = client.get(f"/api/v1/reports/inventory?warehouse_id={other_warehouse.id}", headers=farmer_headers)
        assert denied.status_code == 403
