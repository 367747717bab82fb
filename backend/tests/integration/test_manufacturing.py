"""
Integration Tests — Manufacturing Endpoints

Tests:
- POST /api/v1/manufacturing/runs (validate, consume, output, warnings)
- Step-by-step header, items, output and expenses
- Delete and rollback
- Farmer scope
"""
from decimal import Decimal

from fastapi.testclient import TestClient

from farmledger.repositories.material_repository import MaterialRepository


def _run_payload(warehouse, items, output=None, unit=None, number="MF-1", expenses=()):
    return {
        "invoice": {
            "invoice_number": number,
            "warehouse_id": warehouse.id,
            "blend_name": "Grower mash",
            "material_name_id": output.id if output is not None else None,
            "unit_id": unit.id if unit is not None else None,
            "manufacturing_date": "2026-10-12",
        },
        "items": items,
        "expenses": list(expenses),
    }


def _balance(db, warehouse, material_name):
    db.expire_all()
    record = MaterialRepository(db).get_for_item(warehouse.id, material_name_id=material_name.id)
    return record.current_balance if record is not None else None


class TestManufacturingRun:

    def test_run_produces_sum_of_weights(
        self, client: TestClient, db, admin_headers, warehouse, corn, soy, layer_feed, unit, expense_type, make_material
    ):
        make_material(warehouse, material_name=corn, opening="100")
        make_material(warehouse, material_name=soy, opening="100")
        resp = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
            warehouse,
            [
                {"material_name_id": corn.id, "quantity": "5", "blend_count": 2},
                {"material_name_id": soy.id, "quantity": "3", "blend_count": 2},
            ],
            output=layer_feed,
            unit=unit,
            expenses=[{"expense_type_id": expense_type.id, "amount": "20"}],
        ))
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["success"] is True
        assert body["warnings"] == []
        assert float(body["data"]["quantity"]) == 16.0
        assert body["data"]["output_applied"] is True
        assert len(body["data"]["items"]) == 2
        assert len(body["data"]["expenses"]) == 1
        assert _balance(db, warehouse, corn) == Decimal("95")
        assert _balance(db, warehouse, soy) == Decimal("97")
        assert _balance(db, warehouse, layer_feed) == Decimal("16")

    def test_shortage_fails_before_anything_is_created(
        self, client: TestClient, db, admin_headers, warehouse, corn, layer_feed, unit, make_material
    ):
        make_material(warehouse, material_name=corn, opening="4")
        resp = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
            warehouse, [{"material_name_id": corn.id, "quantity": "5"}], output=layer_feed, unit=unit,
        ))
        assert resp.status_code == 409
        body = resp.json()
        assert body["success"] is False
        assert len(body["shortages"]) == 1
        shortage = body["shortages"][0]
        assert shortage["material_name"] == "Corn"
        assert float(shortage["available"]) == 4.0
        assert float(shortage["required"]) == 5.0
        assert client.get("/api/v1/manufacturing", headers=admin_headers).json()["data"] == []
        assert _balance(db, warehouse, corn) == Decimal("4")

    def test_missing_output_material_is_a_warning(self, client: TestClient, db, admin_headers, warehouse, corn, make_material):
        make_material(warehouse, material_name=corn, opening="50")
        resp = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
            warehouse, [{"material_name_id": corn.id, "quantity": "10"}],
        ))
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert len(body["warnings"]) == 1
        assert body["data"]["output_applied"] is False
        assert _balance(db, warehouse, corn) == Decimal("40")

    def test_run_requires_at_least_one_item(self, client: TestClient, admin_headers, warehouse):
        resp = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(warehouse, []))
        assert resp.status_code == 422

    def test_zero_blend_count_is_rejected(self, client: TestClient, admin_headers, warehouse, corn):
        resp = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
            warehouse, [{"material_name_id": corn.id, "quantity": "1", "blend_count": 0}],
        ))
        assert resp.status_code == 422


class TestManufacturingSteps:

    def test_header_items_then_output(
        self, client: TestClient, db, admin_headers, warehouse, corn, layer_feed, unit, make_material
    ):
        make_material(warehouse, material_name=corn, opening="30")
        header = client.post("/api/v1/manufacturing", headers=admin_headers, json={
            "invoice_number": "MF-STEP",
            "warehouse_id": warehouse.id,
            "material_name_id": layer_feed.id,
            "unit_id": unit.id,
            "manufacturing_date": "2026-10-12",
        })
        assert header.status_code == 201
        invoice_id = header.json()["data"]["id"]

        item = client.post(f"/api/v1/manufacturing/{invoice_id}/items", headers=admin_headers, json={
            "material_name_id": corn.id,
            "quantity": "12",
            "blend_count": 2,
        })
        assert item.status_code == 201
        assert float(item.json()["data"]["weight"]) == 24.0
        assert _balance(db, warehouse, corn) == Decimal("18")

        output = client.post(f"/api/v1/manufacturing/{invoice_id}/output", headers=admin_headers)
        assert output.status_code == 200
        assert float(output.json()["data"]["quantity"]) == 24.0

        again = client.post(f"/api/v1/manufacturing/{invoice_id}/output", headers=admin_headers)
        assert again.status_code == 400
        assert _balance(db, warehouse, layer_feed) == Decimal("24")

    def test_item_beyond_stock_is_rejected(self, client: TestClient, admin_headers, warehouse, corn, make_material):
        make_material(warehouse, material_name=corn, opening="4")
        header = client.post("/api/v1/manufacturing", headers=admin_headers, json={
            "invoice_number": "MF-SHORT",
            "warehouse_id": warehouse.id,
            "manufacturing_date": "2026-10-12",
        }).json()["data"]
        resp = client.post(f"/api/v1/manufacturing/{header['id']}/items", headers=admin_headers, json={
            "material_name_id": corn.id,
            "quantity": "5",
        })
        assert resp.status_code == 409
        assert resp.json()["shortages"][0]["material_name"] == "Corn"

    def test_delete_item_restores_input(self, client: TestClient, db, admin_headers, warehouse, corn, make_material):
        make_material(warehouse, material_name=corn, opening="30")
        header = client.post("/api/v1/manufacturing", headers=admin_headers, json={
            "invoice_number": "MF-DEL-ITEM",
            "warehouse_id": warehouse.id,
            "manufacturing_date": "2026-10-12",
        }).json()["data"]
        item = client.post(f"/api/v1/manufacturing/{header['id']}/items", headers=admin_headers, json={
            "material_name_id": corn.id,
            "quantity": "10",
            "blend_count": 4,
        }).json()["data"]

        resp = client.delete(f"/api/v1/manufacturing/items/{item['id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert _balance(db, warehouse, corn) == Decimal("30")

    def test_delete_run_reverses_everything(
        self, client: TestClient, db, admin_headers, warehouse, corn, layer_feed, unit, make_material
    ):
        make_material(warehouse, material_name=corn, opening="100")
        run = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
            warehouse, [{"material_name_id": corn.id, "quantity": "10", "blend_count": 2}], output=layer_feed, unit=unit,
        )).json()["data"]

        resp = client.delete(f"/api/v1/manufacturing/{run['id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert _balance(db, warehouse, corn) == Decimal("100")
        assert _balance(db, warehouse, layer_feed) == Decimal("0")

    def test_rollback_leaves_balances(
        self, client: TestClient, db, admin_headers, warehouse, corn, layer_feed, unit, make_material
    ):
        make_material(warehouse, material_name=corn, opening="100")
        run = client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
            warehouse, [{"material_name_id": corn.id, "quantity": "10"}], output=layer_feed, unit=unit,
        )).json()["data"]

        resp = client.post(f"/api/v1/manufacturing/{run['id']}/rollback", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get(f"/api/v1/manufacturing/{run['id']}", headers=admin_headers).status_code == 404
        assert _balance(db, warehouse, corn) == Decimal("90")


class TestManufacturingScope:

    def test_farmer_runs_in_own_warehouse(self, client: TestClient, farmer_headers, warehouse, corn, make_material):
        make_material(warehouse, material_name=corn, opening="10")
        resp = client.post("/api/v1/manufacturing/runs", headers=farmer_headers, json=_run_payload(
            warehouse, [{"material_name_id": corn.id, "quantity": "1"}],
        ))
        assert resp.status_code == 201

    def test_farmer_cannot_use_another_warehouse(self, client: TestClient, farmer_headers, other_warehouse, corn):
        resp = client.post("/api/v1/manufacturing/runs", headers=farmer_headers, json=_run_payload(
            other_warehouse, [{"material_name_id": corn.id, "quantity": "1"}],
        ))
        assert resp.status_code == 403
        assert resp.json()["error"] == "Invalid warehouse - not assigned to your farm"

    def test_farmer_lists_only_own_invoices(
        self, client: TestClient, admin_headers, farmer_headers, warehouse, other_warehouse, corn, make_material
    ):
        make_material(warehouse, material_name=corn, opening="10")
        make_material(other_warehouse, material_name=corn, opening="10")
        for target, number in ((warehouse, "MF-MINE"), (other_warehouse, "MF-THEIRS")):
            client.post("/api/v1/manufacturing/runs", headers=admin_headers, json=_run_payload(
                target, [{"material_name_id": corn.id, "quantity": "1"}], number=number,
            ))

        resp = client.get("/api/v1/manufacturing", headers=farmer_headers)
        assert resp.status_code == 200
        assert [i["invoice_number"] for i in resp.json()["data"]] == ["MF-MINE"]

    def test_sub_admin_cannot_delete(self, client: TestClient, sub_admin_headers):
        assert client.delete("/api/v1/manufacturing/1", headers=sub_admin_headers).status_code == 403
