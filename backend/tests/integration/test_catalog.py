"""
Integration Tests — Catalog Endpoints

Tests:
- Units, material names, medicines, clients and expense types share one route set
- Unique names and search
"""
import pytest
from fastapi.testclient import TestClient


@pytest.mark.parametrize(
    "path, payload, name_field",
    [
        ("units", {"unit_name": "ton"}, "unit_name"),
        ("material-names", {"material_name": "Wheat Bran"}, "material_name"),
        ("medicines", {"name": "Vitamin AD3E", "day_of_age": "14"}, "name"),
        ("clients", {"name": "Egg Buyer Ltd", "type": "customer"}, "name"),
        ("expense-types", {"name": "Loading"}, "name"),
    ],
)
def test_create_then_get(client: TestClient, admin_headers, path, payload, name_field):
    created = client.post(f"/api/v1/{path}", headers=admin_headers, json=payload)
    assert created.status_code == 201, created.text
    entity_id = created.json()["data"]["id"]

    fetched = client.get(f"/api/v1/{path}/{entity_id}", headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"][name_field] == payload[name_field]


class TestCatalogRules:

    def test_duplicate_name_is_rejected(self, client: TestClient, admin_headers, corn):
        resp = client.post("/api/v1/material-names", headers=admin_headers, json={"material_name": "Corn"})
        assert resp.status_code == 409

    def test_search(self, client: TestClient, admin_headers, corn, soy):
        resp = client.get("/api/v1/material-names?search=soy", headers=admin_headers)
        assert resp.status_code == 200
        assert [m["material_name"] for m in resp.json()["data"]] == ["Soybean Meal"]

    def test_update_medicine(self, client: TestClient, admin_headers, medicine):
        resp = client.put(f"/api/v1/medicines/{medicine.id}", headers=admin_headers, json={"day_of_age": "21"})
        assert resp.status_code == 200
        assert resp.json()["data"]["day_of_age"] == "21"
        assert resp.json()["data"]["name"] == "Amoxicillin"

    def test_invalid_client_type(self, client: TestClient, admin_headers):
        resp = client.post("/api/v1/clients", headers=admin_headers, json={"name": "Odd", "type": "partner"})
        assert resp.status_code == 422

    def test_delete_unit(self, client: TestClient, admin_headers, unit):
        assert client.delete(f"/api/v1/units/{unit.id}", headers=admin_headers).status_code == 200
        assert client.get(f"/api/v1/units/{unit.id}", headers=admin_headers).status_code == 404

    def test_farmer_reads_but_cannot_write(self, client: TestClient, farmer_headers, unit):
        assert client.get("/api/v1/units", headers=farmer_headers).status_code == 200
        assert client.post("/api/v1/units", headers=farmer_headers, json={"unit_name": "bag"}).status_code == 403
