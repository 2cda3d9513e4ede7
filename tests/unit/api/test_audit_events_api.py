"""Tests for the audit events API: record, list, show, stats, verbs, export, purge."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from auditlog.domain.models.audit_event import AuditEvent


async def _record(client: AsyncClient, headers, **body):
    payload = {"verb": "create", "description": "Created subject Algebra", **body}
    r = await client.post("/audit-events/", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_record_returns_created_event(client: AsyncClient, actor_headers):
    data = await _record(
        client,
        actor_headers,
        verb="update",
        description="Changed plan price",
        subject_type="PaymentPlan",
        subject_id="4",
        metadata={"from": 100, "to": 120},
    )
    assert data["verb"] == "update"
    assert data["actor_id"] == 1
    assert data["ip_address"] == "203.0.113.7"
    assert data["subject_type"] == "PaymentPlan"
    assert data["subject_id"] == "4"
    assert data["metadata"] == {"from": 100, "to": 120}
    uuid.UUID(data["id"])


@pytest.mark.asyncio
async def test_record_rejects_half_subject(client: AsyncClient, actor_headers):
    r = await client.post(
        "/audit-events/",
        json={"verb": "delete", "description": "Deleted", "subject_type": "Invoice"},
        headers=actor_headers,
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_record_rejects_blank_verb(client: AsyncClient, actor_headers):
    r = await client.post(
        "/audit-events/", json={"verb": "  ", "description": "x"}, headers=actor_headers
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_record_store_failure_returns_503(app_with_overrides, client: AsyncClient, actor_headers):
    from auditlog.api import dependencies

    broken = AsyncMock()
    broken.add = AsyncMock(side_effect=Exception("database unavailable"))
    app_with_overrides.dependency_overrides[dependencies.get_audit_repository] = lambda: broken

    r = await client.post(
        "/audit-events/", json={"verb": "create", "description": "x"}, headers=actor_headers
    )
    assert r.status_code == 503


@pytest.mark.asyncio
async def test_list_filters_by_verb_and_logs_access(client: AsyncClient, actor_headers):
    await _record(client, actor_headers)
    await _record(client, actor_headers, verb="update", description="Renamed subject")

    r = await client.get("/audit-events/", params={"verb": "update"}, headers=actor_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    assert data["items"][0]["verb"] == "update"
    assert data["sort"] == "created_at"
    assert data["direction"] == "desc"

    r = await client.get("/audit-events/", params={"verb": "access"}, headers=actor_headers)
    assert r.json()["total"] == 2


@pytest.mark.asyncio
async def test_list_page_beyond_last_is_empty(client: AsyncClient, actor_headers):
    await _record(client, actor_headers)
    r = await client.get(
        "/audit-events/", params={"page": 50, "per_page": 10}, headers=actor_headers
    )
    assert r.status_code == 200
    data = r.json()
    assert data["items"] == []
    assert data["page"] == 50
    assert data["total"] >= 1


@pytest.mark.asyncio
async def test_list_sort_and_bad_sort(client: AsyncClient, actor_headers):
    for verb in ("update", "create", "delete"):
        await _record(client, actor_headers, verb=verb)

    r = await client.get(
        "/audit-events/",
        params={"sort": "verb", "direction": "asc", "subject_type": ""},
        headers=actor_headers,
    )
    verbs = [item["verb"] for item in r.json()["items"]]
    assert verbs == sorted(verbs)

    r = await client.get("/audit-events/", params={"sort": "password"}, headers=actor_headers)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_per_page_above_max_is_rejected(client: AsyncClient, actor_headers):
    r = await client.get("/audit-events/", params={"per_page": 1000}, headers=actor_headers)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_show_event_and_not_found(client: AsyncClient, actor_headers):
    created = await _record(client, actor_headers)

    r = await client.get(f"/audit-events/{created['id']}", headers=actor_headers)
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]

    r = await client.get(f"/audit-events/{uuid.uuid4()}", headers=actor_headers)
    assert r.status_code == 404

    r = await client.get("/audit-events/", params={"verb": "view"}, headers=actor_headers)
    [view] = r.json()["items"]
    assert view["subject_type"] == "AuditEvent"
    assert view["subject_id"] == created["id"]


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, actor_headers):
    await _record(client, actor_headers)
    await _record(client, actor_headers)
    await _record(client, actor_headers, verb="update", description="Changed room")

    r = await client.get("/audit-events/stats", headers=actor_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 3
    assert data["create_count"] == 2
    assert data["update_count"] == 1
    assert data["other_count"] == 0
    assert data["active_actors"] == 1


@pytest.mark.asyncio
async def test_stats_degrade_to_zero_when_store_down(app_with_overrides, client: AsyncClient):
    from auditlog.api import dependencies

    broken = AsyncMock()
    broken.count = AsyncMock(side_effect=ConnectionError("refused"))
    app_with_overrides.dependency_overrides[dependencies.get_audit_repository] = lambda: broken

    r = await client.get("/audit-events/stats")
    assert r.status_code == 200
    assert set(r.json().values()) == {0}


@pytest.mark.asyncio
async def test_list_failure_returns_503(app_with_overrides, client: AsyncClient):
    from auditlog.api import dependencies

    broken = AsyncMock()
    broken.add = AsyncMock(side_effect=ConnectionError("refused"))
    broken.find = AsyncMock(side_effect=ConnectionError("refused"))
    app_with_overrides.dependency_overrides[dependencies.get_audit_repository] = lambda: broken

    r = await client.get("/audit-events/")
    assert r.status_code == 503
    assert "detail" in r.json()


@pytest.mark.asyncio
async def test_verbs(client: AsyncClient, actor_headers):
    await _record(client, actor_headers, verb="login", description="Signed in")
    r = await client.get("/audit-events/verbs", headers=actor_headers)
    assert r.status_code == 200
    assert r.json() == ["login"]


@pytest.mark.asyncio
async def test_export_csv(client: AsyncClient, actor_headers):
    await _record(client, actor_headers, verb="payment", description="Payment of 300 processed")

    r = await client.get("/audit-events/export", params={"verb": "payment"}, headers=actor_headers)

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]
    lines = r.text.splitlines()
    assert lines[0].startswith("id,created_at,actor_id,verb")
    assert len(lines) == 2
    assert "Payment of 300 processed" in lines[1]

    r = await client.get("/audit-events/", params={"verb": "export"}, headers=actor_headers)
    [export_event] = r.json()["items"]
    assert export_event["metadata"] == {"rows": 1, "filters": {"verb": "payment"}}


@pytest.mark.asyncio
async def test_purge(client: AsyncClient, actor_headers, db_repository):
    old = AuditEvent(
        id=uuid.uuid4(),
        verb="create",
        description="Created last year's timetable",
        created_at=datetime.now(timezone.utc) - timedelta(days=200),
    )
    await db_repository.add(old)

    r = await client.post("/audit-events/purge", json={"days": 90}, headers=actor_headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": 1, "days": 90}

    r = await client.post("/audit-events/purge", json={"days": 90}, headers=actor_headers)
    assert r.json() == {"deleted": 0, "days": 90}

    r = await client.get("/audit-events/", params={"verb": "bulk_delete"}, headers=actor_headers)
    assert r.json()["total"] == 2


@pytest.mark.asyncio
async def test_purge_defaults_to_configured_retention(client: AsyncClient):
    r = await client.post("/audit-events/purge")
    assert r.status_code == 200
    assert r.json() == {"deleted": 0, "days": 90}


@pytest.mark.asyncio
async def test_purge_negative_days_rejected(client: AsyncClient):
    r = await client.post("/audit-events/purge", json={"days": -1})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_purge_failure_returns_503(app_with_overrides, client: AsyncClient):
    from auditlog.api import dependencies

    broken = AsyncMock()
    broken.delete_older_than = AsyncMock(side_effect=ConnectionError("refused"))
    app_with_overrides.dependency_overrides[dependencies.get_audit_repository] = lambda: broken

    r = await client.post("/audit-events/purge", json={"days": 30})
    assert r.status_code == 503
    broken.add.assert_not_awaited()


@pytest.mark.asyncio
async def test_purge_zero_days_rejected(client: AsyncClient):
    r = await client.post("/audit-events/purge", json={"days": 0})
    assert r.status_code == 422
