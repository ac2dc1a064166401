from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


def _donate(client: TestClient, **body):
    return client.post("/api/donation", json=body)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "OK"
    assert payload["app"] == "Smart Charity Box Server"
    assert payload["database"] == {"status": "connected", "type": "SQLite"}
    assert payload["server"]["environment"] == "development"


def test_donation_endpoint_returns_created_record(client: TestClient) -> None:
    response = _donate(client, amount=1000, deviceId="box-7")
    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["amount"] == 1000
    assert data["deviceId"] == "box-7"
    assert {"id", "recordedAt", "createdAt", "updatedAt"} <= data.keys()


def test_legacy_nominal_key_is_accepted(client: TestClient) -> None:
    response = _donate(client, nominal=2500)
    assert response.status_code == 200
    assert response.json()["data"]["deviceId"] == "smart_charity_box_01"


def test_invalid_donation_is_a_bad_request(client: TestClient) -> None:
    for body in ({"amount": -1}, {"amount": "500"}, {}):
        response = client.post("/api/donation", json=body)
        assert response.status_code == 400
        assert response.json()["success"] is False

    assert client.get("/api/total").json()["count"] == 0


def test_malformed_json_is_a_bad_request(client: TestClient) -> None:
    response = client.post(
        "/api/donation",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid request body"}


def test_totals_history_and_top(client: TestClient) -> None:
    for amount in (1000, 500, 2000):
        assert _donate(client, amount=amount).status_code == 200

    total = client.get("/api/total").json()
    assert total["total"] == 3500
    assert total["count"] == 3
    assert total["formatted"] == {"total": "Rp 3.500", "count": "3 donasi"}

    history = client.get("/api/history", params={"page": 1, "limit": 2}).json()
    assert len(history["data"]) == 2
    assert history["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    top = client.get("/api/top-donations", params={"limit": 2}).json()
    assert [row["amount"] for row in top["data"]] == [2000, 1000]
    assert top["message"] == "2 largest donations"


def test_history_rejects_non_numeric_page(client: TestClient) -> None:
    response = client.get("/api/history", params={"page": "first"})
    assert response.status_code == 400


def test_daily_stats(client: TestClient) -> None:
    _donate(client, amount=1500)
    payload = client.get("/api/daily-stats").json()
    assert payload["total"] == 1500
    assert payload["count"] == 1
    assert payload["formatted"]["count"] == "1 donasi hari ini"


def test_period_stats(client: TestClient) -> None:
    _donate(client, amount=1000)
    _donate(client, amount=2001)

    payload = client.get("/api/stats/week").json()
    assert payload["period"] == "week"
    assert payload["periodName"] == "7 hari terakhir"
    assert payload["stats"] == {"total": 3001, "count": 2, "average": 1501}
    assert payload["formatted"]["average"] == "Rp 1.501 per donasi"
    assert payload["startDate"] < payload["endDate"]


def test_unknown_period_is_a_bad_request(client: TestClient) -> None:
    response = client.get("/api/stats/bogus")
    assert response.status_code == 400
    assert "week, month, or year" in response.json()["message"]


def test_reset_keeps_history(client: TestClient) -> None:
    _donate(client, amount=1000)
    _donate(client, amount=2000)

    first = client.delete("/api/reset-donations").json()
    assert first["deletedCount"] == 2
    assert client.delete("/api/reset-donations").json()["deletedCount"] == 0

    assert client.get("/api/total").json()["total"] == 0
    assert client.get("/api/stats/year").json()["stats"]["count"] == 0
    assert client.get("/api/history").json()["pagination"]["total"] == 2


def test_lcd_message_roundtrip(client: TestClient) -> None:
    initial = client.get("/api/lcd-message").json()
    assert initial["message"] == {"line1": "Sedekah membawa", "line2": "berkah"}

    response = client.post("/api/lcd-message", json={"line1": "Terima kasih banyak!", "line2": "Hari ini"})
    assert response.status_code == 200
    assert response.json()["data"] == {"line1": "Terima kasih ban", "line2": "Hari ini"}
    assert client.get("/api/lcd-message").json()["message"]["line1"] == "Terima kasih ban"


def test_lcd_message_rejects_non_strings(client: TestClient) -> None:
    response = client.post("/api/lcd-message", json={"line1": 5})
    assert response.status_code == 400
    assert client.get("/api/lcd-message").json()["message"]["line1"] == "Sedekah membawa"


def test_unknown_endpoint_lists_available_ones(client: TestClient) -> None:
    response = client.get("/api/nope")
    assert response.status_code == 404
    payload = response.json()
    assert payload["message"] == "Endpoint GET /api/nope not found"
    assert "POST /api/donation" in payload["availableEndpoints"]


def test_amount_too_large_to_store_is_a_bad_request(client: TestClient) -> None:
    response = _donate(client, amount=2**63)
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert client.get("/api/history").json()["pagination"]["total"] == 0


def test_huge_page_number_is_not_a_server_error(client: TestClient) -> None:
    response = client.get("/api/history", params={"page": str(10**20)})
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_period_echoes_requested_name(client: TestClient) -> None:
    assert client.get("/api/stats/Year").json()["period"] == "Year"


def _break_commits(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_commit(self):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(Session, "commit", broken_commit)


def test_storage_failure_shows_detail_in_development(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    _break_commits(monkeypatch)
    response = _donate(client, amount=1000)
    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Error saving donation data to the database"
    assert "disk full" in payload["error"]


def test_storage_failure_hides_detail_in_production(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    client.app.state.settings.ENVIRONMENT = "production"
    _break_commits(monkeypatch)
    response = _donate(client, amount=1000)
    assert response.status_code == 500
    payload = response.json()
    assert payload == {"success": False, "message": "Error saving donation data to the database"}

    monkeypatch.undo()
    assert client.get("/api/total").json()["count"] == 0
