"""
Integration Tests — Daily Report Endpoints

Tests:
- POST /api/v1/daily-reports books eggs, sales and medicine use
- GET list/detail with warehouse scoping
- PUT, PATCH checked, DELETE with reversal
"""
from decimal import Decimal

from fastapi.testclient import TestClient

from farmledger.models.material import Material
from farmledger.models.catalog import MaterialName


def _create_report(client, headers, warehouse, expected=201, **fields):
    payload = {"warehouse_id": warehouse.id, "report_date": "2026-10-12", **fields}
    resp = client.post("/api/v1/daily-reports", headers=headers, json=payload)
    assert resp.status_code == expected, resp.text
    return resp.json()


def _egg_balance(db, warehouse) -> Decimal:
    db.expire_all()
    eggs = db.query(MaterialName).filter_by(material_name="Eggs").one()
    return db.query(Material).filter_by(warehouse_id=warehouse.id, material_name_id=eggs.id).one().current_balance


class TestDailyReportCreate:

    def test_farmer_reports_production_and_sales(self, client: TestClient, db, farmer_headers, warehouse, carton):
        body = _create_report(
            client,
            farmer_headers,
            warehouse,
            report_time="07:30:00",
            production_eggs_healthy="120",
            production_eggs_deformed="6",
            chicks_before=140,
            chicks_dead=2,
            egg_sales=[{"items": [{"quantity": "100", "price": "3.2", "egg_weight": "L"}]}],
        )
        data = body["data"]
        assert body["success"] is True
        assert float(data["production_eggs"]) == 126.0
        assert float(data["production_egg_rate"]) == 90.0
        assert float(data["eggs_sold"]) == 100.0
        assert data["chicks_after"] == 138
        assert data["checked"] is False
        assert [i["invoice_number"] for i in data["sale_invoices"]] == [f"EGG-SALE-{data['id']}-1"]
        assert data["sale_invoices"][0]["daily_report_id"] == data["id"]
        assert float(data["sale_invoices"][0]["net_value"]) == 320.0
        assert _egg_balance(db, warehouse) == Decimal("20")

    def test_missing_carton_unit(self, client: TestClient, admin_headers, warehouse):
        body = _create_report(client, admin_headers, warehouse, expected=400, production_eggs_healthy="5")
        assert body["code"] == "VALIDATION_ERROR"

    def test_egg_sale_beyond_stock_returns_shortage(self, client: TestClient, admin_headers, warehouse, carton):
        body = _create_report(
            client,
            admin_headers,
            warehouse,
            expected=409,
            production_eggs_healthy="10",
            egg_sales=[{"items": [{"quantity": "12"}]}],
        )
        shortage = body["shortages"][0]
        assert shortage["material_name"] == "Eggs"
        assert float(shortage["available"]) == 10.0
        assert float(shortage["required"]) == 12.0
        assert client.get("/api/v1/daily-reports", headers=admin_headers).json()["data"] == []

    def test_negative_figures_rejected(self, client: TestClient, admin_headers, warehouse, carton):
        _create_report(client, admin_headers, warehouse, expected=422, eggs_gift="-1")

    def test_sub_admin_cannot_create(self, client: TestClient, sub_admin_headers, warehouse, carton):
        _create_report(client, sub_admin_headers, warehouse, expected=403)

    def test_farmer_cannot_report_for_other_warehouse(self, client: TestClient, farmer_headers, other_warehouse, carton):
        _create_report(client, farmer_headers, other_warehouse, expected=403)


class TestDailyReportQueries:

    def test_list_is_scoped_and_newest_first(
        self, client: TestClient, admin_headers, farmer_headers, warehouse, other_warehouse, carton
    ):
        _create_report(client, admin_headers, warehouse, report_date="2026-10-10")
        _create_report(client, admin_headers, warehouse, report_date="2026-10-11")
        _create_report(client, admin_headers, other_warehouse, report_date="2026-10-11")

        mine = client.get("/api/v1/daily-reports", headers=farmer_headers).json()["data"]
        assert [(r["warehouse_id"], r["report_date"]) for r in mine] == [
            (warehouse.id, "2026-10-11"),
            (warehouse.id, "2026-10-10"),
        ]
        everything = client.get("/api/v1/daily-reports", headers=admin_headers).json()["data"]
        assert len(everything) == 3
        ranged = client.get(
            "/api/v1/daily-reports",
            headers=admin_headers,
            params={"warehouse_id": warehouse.id, "date_from": "2026-10-11"},
        ).json()["data"]
        assert [r["report_date"] for r in ranged] == ["2026-10-11"]

    def test_farmer_cannot_read_other_farms_report(
        self, client: TestClient, admin_headers, farmer_headers, other_warehouse, carton
    ):
        theirs = _create_report(client, admin_headers, other_warehouse)["data"]
        assert client.get(f"/api/v1/daily-reports/{theirs['id']}", headers=farmer_headers).status_code == 403

    def test_unknown_report(self, client: TestClient, admin_headers):
        assert client.get("/api/v1/daily-reports/999", headers=admin_headers).status_code == 404


class TestDailyReportChanges:

    def test_update_recomputes_surviving_flock(self, client: TestClient, farmer_headers, warehouse, carton):
        report = _create_report(client, farmer_headers, warehouse, chicks_before=100, chicks_dead=1)["data"]
        resp = client.put(f"/api/v1/daily-reports/{report['id']}", headers=farmer_headers, json={
            "chicks_dead": 5,
            "notes": "Heat wave",
        })
        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["chicks_after"] == 95
        assert resp.json()["data"]["notes"] == "Heat wave"

    def test_update_rejects_null_and_excess_deaths(self, client: TestClient, admin_headers, warehouse, carton):
        report = _create_report(client, admin_headers, warehouse, chicks_before=10)["data"]
        url = f"/api/v1/daily-reports/{report['id']}"
        assert client.put(url, headers=admin_headers, json={"feed_ratio": None}).status_code == 422
        assert client.put(url, headers=admin_headers, json={"chicks_dead": 11}).status_code == 400

    def test_toggle_checked(self, client: TestClient, admin_headers, sub_admin_headers, farmer_headers, warehouse, carton):
        report = _create_report(client, admin_headers, warehouse)["data"]
        url = f"/api/v1/daily-reports/{report['id']}/checked"
        assert client.patch(url, headers=farmer_headers).status_code == 403
        assert client.patch(url, headers=sub_admin_headers).json()["data"]["checked"] is True
        assert client.patch(url, headers=admin_headers).json()["data"]["checked"] is False

    def test_delete_restores_stock_and_removes_invoices(
        self, client: TestClient, db, admin_headers, farmer_headers, warehouse, carton
    ):
        report = _create_report(
            client,
            farmer_headers,
            warehouse,
            production_eggs_healthy="50",
            eggs_gift="2",
            egg_sales=[{"items": [{"quantity": "30", "price": "2"}]}],
        )["data"]
        invoice_id = report["sale_invoices"][0]["id"]
        assert _egg_balance(db, warehouse) == Decimal("18")

        assert client.delete(f"/api/v1/daily-reports/{report['id']}", headers=farmer_headers).status_code == 403
        resp = client.delete(f"/api/v1/daily-reports/{report['id']}", headers=admin_headers)
        assert resp.status_code == 200, resp.text

        assert _egg_balance(db, warehouse) == Decimal("0")
        assert client.get(f"/api/v1/invoices/{invoice_id}", headers=admin_headers).status_code == 404
        assert client.get(f"/api/v1/daily-reports/{report['id']}", headers=admin_headers).status_code == 404
