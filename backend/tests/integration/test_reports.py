"""
Integration Tests — Reporting Endpoints

Tests:
- GET /api/v1/reports/entries
- GET /api/v1/reports/summary
"""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def approved_entry(client: TestClient, operator_headers, supervisor_headers, draft):
    entry = client.post("/api/v1/production-entries/submit", headers=operator_headers, json=draft).json()
    client.post(f"/api/v1/review/entries/{entry['id']}/approve", headers=supervisor_headers)
    client.post(
        "/api/v1/production-entries/submit",
        headers=operator_headers,
        json=dict(draft, time_slot="08:00-09:00"),
    )
    return entry


class TestReports:

    def test_only_approved_entries(self, client: TestClient, admin_headers, approved_entry):
        resp = client.get("/api/v1/reports/entries", headers=admin_headers)
        assert resp.status_code == 200
        assert [e["id"] for e in resp.json()] == [approved_entry["id"]]

    def test_summary(self, client: TestClient, supervisor_headers, approved_entry):
        resp = client.get(
            "/api/v1/reports/summary?start_date=2026-03-01&end_date=2026-03-31",
            headers=supervisor_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["entry_count"] == 1
        assert data["total_ok"] == 95
        assert data["ok_pct"] == 95.0

    def test_invalid_range(self, client: TestClient, admin_headers):
        resp = client.get(
            "/api/v1/reports/entries?start_date=2026-03-31&end_date=2026-03-01",
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_operator_forbidden(self, client: TestClient, operator_headers):
        resp = client.get("/api/v1/reports/entries", headers=operator_headers)
        assert resp.status_code == 403
