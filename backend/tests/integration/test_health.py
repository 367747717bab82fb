"""
Integration Tests — Health Endpoints
"""
from fastapi.testclient import TestClient


def test_root(client: TestClient):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "running"
    assert resp.json()["api"] == "/api/v1"


def test_health(client: TestClient):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_ready_echoes_request_id(client: TestClient):
    resp = client.get("/ready", headers={"X-Request-ID": "req-42"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ready"
    assert body["request_id"] == "req-42"
    assert body["checks"]["database"]["ok"] is True
    assert body["checks"]["database"]["missing_tables"] == []


def test_unknown_route(client: TestClient):
    assert client.get("/api/v1/does-not-exist").status_code == 404


def test_lifespan_creates_tables_on_startup(monkeypatch):
    from farmledger import main

    calls = []
    monkeypatch.setattr(main, "create_tables", lambda: calls.append("create"))
    with TestClient(main.app) as lifespan_client:
        assert calls == ["create"]
        assert lifespan_client.get("/health").status_code == 200
