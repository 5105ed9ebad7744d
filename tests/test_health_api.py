"""Tests for system endpoints."""


def test_liveness(test_client):
    assert test_client.get("/health").json() == {"status": "ok"}


def test_status_reports_ai_configuration(test_client):
    payload = test_client.get("/api/health/status").json()

    assert payload["status"] == "online"
    assert payload["ai_configured"] is True


def test_database_check(test_client, stored_session):
    stored_session()

    payload = test_client.get("/api/health/database").json()

    assert payload == {"status": "ok", "database": "connected", "sessions": 1}


def test_unknown_route_uses_error_envelope(test_client):
    response = test_client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}
