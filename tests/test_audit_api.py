"""Free audit request intake and lookup."""
from datetime import datetime, timedelta

import pytest

from cybershield.models.audit_request import AuditPriority, AuditRequest, AuditStatus, AuditUrgency
from cybershield.services.audits import priority_for_urgency


def _audit_payload(**overrides):
    payload = {
        "name": "Carlos Ruiz",
        "email": "carlos@example.com",
        "company": "Ruiz Logistics",
        "employees": 45,
        "description": "We had a phishing incident last month and want a review.",
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    ("urgency", "priority"),
    [
        ("critical", AuditPriority.high),
        ("high", AuditPriority.medium),
        ("medium", AuditPriority.normal),
        ("low", AuditPriority.normal),
        (AuditUrgency.critical, AuditPriority.high),
        ("unexpected", AuditPriority.normal),
    ],
)
def test_priority_for_urgency(urgency, priority):
    assert priority_for_urgency(urgency) == priority


@pytest.mark.anyio("asyncio")
async def test_audit_request_critical_is_high_priority(client, db_session, mailer):
    resp = await client.post("/api/audit/request", json=_audit_payload(urgency="critical"))
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["status"] == "pending"
    assert set(data) == {"id", "status", "created_at"}

    stored = db_session.get(AuditRequest, data["id"])
    assert stored.priority == AuditPriority.high
    assert stored.status == AuditStatus.pending

    recipients = sorted(email.to for email in mailer.sent)
    assert recipients == ["carlos@example.com", "ops@example.com"]
    confirmation = next(email for email in mailer.sent if email.to == "carlos@example.com")
    assert f"#{data['id']}" in confirmation.text


@pytest.mark.anyio("asyncio")
async def test_audit_request_defaults(client, db_session):
    resp = await client.post("/api/audit/request", json=_audit_payload())
    assert resp.status_code == 201

    stored = db_session.get(AuditRequest, resp.json()["data"]["id"])
    assert stored.urgency == AuditUrgency.medium
    assert stored.priority == AuditPriority.normal
    assert stored.preferred_contact.value == "email"
    assert stored.budget is None


@pytest.mark.anyio("asyncio")
async def test_audit_request_notifications_are_independent(client, failing_mailer):
    resp = await client.post("/api/audit/request", json=_audit_payload())
    assert resp.status_code == 201
    assert len(failing_mailer.attempts) == 2


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "overrides",
    [
        {"employees": 0},
        {"employees": 10001},
        {"description": "too short"},
        {"urgency": "whenever"},
        {"budget": "unlimited"},
        {"preferred_contact": "fax"},
        {"company": "X"},
    ],
)
async def test_audit_request_validation(client, db_session, overrides):
    resp = await client.post("/api/audit/request", json=_audit_payload(**overrides))
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert db_session.query(AuditRequest).count() == 0


@pytest.mark.anyio("asyncio")
async def test_audit_limiter_allows_three_per_day(client):
    for _ in range(3):
        assert (await client.post("/api/audit/request", json=_audit_payload())).status_code == 201

    blocked = await client.post("/api/audit/request", json=_audit_payload())
    assert blocked.status_code == 429
    assert blocked.json()["success"] is False


@pytest.mark.anyio("asyncio")
async def test_audit_status_lookup(client):
    created = await client.post(
        "/api/audit/request", json=_audit_payload(urgency="high", company="Status Corp")
    )
    audit_id = created.json()["data"]["id"]

    resp = await client.get(f"/api/audit/status/{audit_id}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data == {
        "id": audit_id,
        "status": "pending",
        "created_at": data["created_at"],
        "company": "Status Corp",
        "urgency": "high",
    }


@pytest.mark.anyio("asyncio")
async def test_audit_status_unknown_id(client):
    resp = await client.get("/api/audit/status/999999")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "audit_id", ["99999999999999999999999", str(2**63), "0", "-1", "abc", "1.5"]
)
async def test_audit_status_impossible_id_is_not_found(client, audit_id):
    resp = await client.get(f"/api/audit/status/{audit_id}")
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == "NOT_FOUND"
    assert body["message"] == "Request not found."


@pytest.mark.anyio("asyncio")
async def test_audit_timestamps_keep_utc_offset(client, auth_headers):
    created = await client.post("/api/audit/request", json=_audit_payload())
    audit_id = created.json()["data"]["id"]

    status_resp = await client.get(f"/api/audit/status/{audit_id}")
    listed = await client.get("/api/audit/requests", headers=auth_headers)

    for value in (
        created.json()["data"]["created_at"],
        status_resp.json()["data"]["created_at"],
        listed.json()["data"][0]["created_at"],
    ):
        assert datetime.fromisoformat(value.replace("Z", "+00:00")).utcoffset() == timedelta(0)


@pytest.mark.anyio("asyncio")
async def test_audit_list_requires_token(client, auth_headers):
    await client.post("/api/audit/request", json=_audit_payload())

    anonymous = await client.get("/api/audit/requests")
    assert anonymous.status_code == 401

    resp = await client.get("/api/audit/requests", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    assert body["data"][0]["priority"] == "normal"
