import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from gestor.services.contacts import clientes


@pytest.mark.parametrize("path", ["/clients", "/brands", "/categories", "/products", "/personnel", "/positions", "/services", "/providers"])
def test_unauthenticated_requests_are_rejected(anon, path):
    res = anon.get(path)
    assert res.status_code == 401
    assert res.json() == {"error": "Not authenticated"}


def test_unauthenticated_wins_over_bad_identifier(anon):
    assert anon.get("/clients/not-a-uuid").status_code == 401


def test_unauthenticated_wins_over_malformed_body(anon):
    res = anon.post("/brands", content=b"{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 401
    assert res.json() == {"error": "Not authenticated"}


def test_unauthenticated_wins_over_invalid_body(anon, missing_id):
    assert anon.post("/clients", json={"tipo": "OTRO"}).status_code == 401
    assert anon.put(f"/products/{missing_id}/items/{missing_id}", json={"estado": "PERDIDO"}).status_code == 401
    bad_token = {"Authorization": "Bearer not-a-jwt"}
    assert anon.post("/personnel/x/positions", json={}, headers=bad_token).status_code == 401


def test_malformed_body_is_reported_at_body_level(owner_a):
    res = owner_a.post("/brands", content=b"{not json", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Invalid input"
    assert list(body["details"]) == ["_body"]
    assert body["details"]["_body"][0].startswith("Malformed JSON body")


def test_malformed_identifier_is_bad_request(owner_a):
    for path in ("/clients/123", "/products/abc/items", "/personnel/xyz/positions"):
        res = owner_a.get(path)
        assert res.status_code == 400, path
        assert res.json() == {"error": "Invalid identifier"}


def test_validation_reports_every_field(owner_a):
    res = owner_a.post("/clients", json={"nombre": "", "tipo": "OTRO", "email": "nope"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Invalid input"
    assert {"nombre", "tipo", "email"} <= set(body["details"])


def test_empty_update_is_rejected(owner_a):
    created = owner_a.post("/clients", json={"nombre": "Acme", "tipo": "EMPRESA"}).json()
    res = owner_a.put(f"/clients/{created['id']}", json={})
    assert res.status_code == 400
    assert res.json() == {"error": "Nothing to update"}


def test_null_for_required_field_is_rejected(owner_a):
    created = owner_a.post("/clients", json={"nombre": "Acme", "tipo": "EMPRESA"}).json()
    res = owner_a.put(f"/clients/{created['id']}", json={"nombre": None})
    assert res.status_code == 400
    assert "nombre" in res.json()["details"]


def test_database_error_is_internal(owner_a, monkeypatch):
    def boom(db, owner_id):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(clientes, "list", boom)
    res = owner_a.get("/clients")
    assert res.status_code == 500
    assert res.json()["error"] == "Database error"
    assert "connection refused" in res.json()["details"]


def test_unexpected_error_is_internal(app, owner_a, monkeypatch):
    def boom(db, owner_id):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(clientes, "list", boom)
    client = TestClient(app, raise_server_exceptions=False, headers=dict(owner_a.headers))
    res = client.get("/clients")
    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error", "details": "kaboom"}


def test_request_id_is_echoed(owner_a):
    res = owner_a.get("/clients", headers={"X-Request-ID": "abc-123"})
    assert res.headers["X-Request-ID"] == "abc-123"


def test_health(anon):
    res = anon.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_request_completion_is_logged(owner_a):
    from structlog.testing import capture_logs

    with capture_logs() as logs:
        owner_a.get("/clients")
    done = [e for e in logs if e["event"] == "request_completed"]
    assert done and done[-1]["status_code"] == 200
    assert done[-1]["duration_ms"] >= 0
