"""
Integration Tests — Supervisor Review Endpoints

Tests:
- GET /api/v1/review/pending
- POST /api/v1/review/entries/{id}/approve | /reject | /reopen
- PATCH /api/v1/review/entries/{id}
- POST /api/v1/review/bulk-approve | /bulk-reject
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text


SLOTS = ["07:00-08:00", "08:00-09:00", "09:00-10:00"]


@pytest.fixture()
def pending_ids(client: TestClient, operator_headers, draft):
    ids = []
    for slot in SLOTS:
        resp = client.post(
            "/api/v1/production-entries/submit",
            headers=operator_headers,
            json=dict(draft, time_slot=slot),
        )
        assert resp.status_code == 201
        ids.append(resp.json()["id"])
    return ids


class TestReviewQueue:

    def test_pending_list(self, client: TestClient, supervisor_headers, pending_ids):
        resp = client.get("/api/v1/review/pending?entry_date=2026-03-02", headers=supervisor_headers)
        assert resp.status_code == 200
        assert [e["id"] for e in resp.json()] == pending_ids

    def test_operator_cannot_review(self, client: TestClient, operator_headers, pending_ids):
        resp = client.get("/api/v1/review/pending?entry_date=2026-03-02", headers=operator_headers)
        assert resp.status_code == 403

    def test_approve_records_supervisor_name(self, client: TestClient, supervisor_headers, pending_ids):
        resp = client.post(f"/api/v1/review/entries/{pending_ids[0]}/approve", headers=supervisor_headers)
        assert resp.status_code == 200
        assert resp.json()["approved_by"] == "Sam Supervisor"

        again = client.post(f"/api/v1/review/entries/{pending_ids[0]}/approve", headers=supervisor_headers)
        assert again.status_code == 404
        assert again.json()["error"]["code"] == "ENTRY_NOT_PENDING"

    def test_reject_requires_reason(self, client: TestClient, supervisor_headers, pending_ids):
        resp = client.post(
            f"/api/v1/review/entries/{pending_ids[0]}/reject",
            headers=supervisor_headers,
            json={"reason": ""},
        )
        assert resp.status_code == 400

    def test_reject_and_reopen(self, client: TestClient, supervisor_headers, pending_ids):
        entry_id = pending_ids[1]
        resp = client.post(
            f"/api/v1/review/entries/{entry_id}/reject",
            headers=supervisor_headers,
            json={"reason": "Quantity mismatch"},
        )
        assert resp.status_code == 200
        assert resp.json()["approver_status"] == "rejected"

        resp = client.patch(f"/api/v1/review/entries/{entry_id}", headers=supervisor_headers, json={"ok_qty": 90})
        assert resp.status_code == 200
        assert resp.json()["approver_status"] == "rejected"

        resp = client.post(f"/api/v1/review/entries/{entry_id}/reopen", headers=supervisor_headers)
        assert resp.status_code == 200
        assert resp.json()["approver_status"] == "pending"
        assert resp.json()["ok_qty"] == 90

    def test_edit_approved_entry_conflicts(self, client: TestClient, supervisor_headers, pending_ids):
        client.post(f"/api/v1/review/entries/{pending_ids[0]}/approve", headers=supervisor_headers)
        resp = client.patch(f"/api/v1/review/entries/{pending_ids[0]}", headers=supervisor_headers, json={"ok_qty": 1})
        assert resp.status_code == 409

    def test_missing_entry(self, client: TestClient, supervisor_headers):
        resp = client.post("/api/v1/review/entries/9999/approve", headers=supervisor_headers)
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"


class TestBulkReview:

    def test_bulk_reject_all(self, client: TestClient, supervisor_headers, pending_ids):
        resp = client.post(
            "/api/v1/review/bulk-reject",
            headers=supervisor_headers,
            json={"entry_ids": pending_ids, "reason": "Wrong shift"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["succeeded"] == 3
        assert data["failed"] == 0

        pending = client.get("/api/v1/review/pending?entry_date=2026-03-02", headers=supervisor_headers)
        assert pending.json() == []

    def test_bulk_approve_partial(self, client: TestClient, supervisor_headers, pending_ids):
        client.post(f"/api/v1/review/entries/{pending_ids[0]}/approve", headers=supervisor_headers)
        resp = client.post(
            "/api/v1/review/bulk-approve",
            headers=supervisor_headers,
            json={"entry_ids": pending_ids + [4242]},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["policy"] == "best_effort"
        assert data["succeeded_ids"] == pending_ids[1:]
        assert {f["id"]: f["reason"] for f in data["failures"]} == {
            pending_ids[0]: "not_pending",
            4242: "not_found",
        }

    def test_bulk_approve_empty_list(self, client: TestClient, supervisor_headers):
        resp = client.post("/api/v1/review/bulk-approve", headers=supervisor_headers, json={"entry_ids": []})
        assert resp.status_code == 422


class TestAtlRoster:

    def test_roster_lists_supervisors(self, client: TestClient, operator_headers, supervisor_user):
        resp = client.get("/api/v1/review/atl-roster", headers=operator_headers)
        assert resp.status_code == 200
        assert resp.json()["names"] == ["Sam Supervisor"]

    def test_submit_with_unknown_atl(self, client: TestClient, operator_headers, supervisor_user, draft):
        resp = client.post(
            "/api/v1/production-entries/submit",
            headers=operator_headers,
            json=dict(draft, atl="Someone Else"),
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["details"]["field"] == "atl"


class TestDatabaseOutage:

    def test_pending_queue_returns_503_when_table_is_gone(self, client: TestClient, supervisor_headers, db):
        db.execute(text("DROP TABLE production_entries"))
        db.commit()

        resp = client.get("/api/v1/review/pending", headers=supervisor_headers)
        assert resp.status_code == 503
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "REMOTE_UNAVAILABLE"
