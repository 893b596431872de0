from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from dmroom.bootstrap.main import create_app
from dmroom.core.ports.services import Clock
from dmroom.infrastructure.db.models import UserRelationships
from dmroom.infrastructure.security.jwt_provider import JoseTokenProvider
from dmroom.presentation.api.deps.containers import get_clock, get_db_session, get_notification_dispatcher

BASE = "/api/v1/direct-message-rooms"


class NewYearClock(Clock):
    def now(self):
        return datetime(2026, 1, 1, tzinfo=timezone.utc)


def _auth(user_id: int) -> dict:
    token = JoseTokenProvider().create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
async def client(session_factory, seeded_users, dispatcher):
    async def _session():
        async with session_factory() as s:
            yield s

    app = create_app()
    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_clock] = lambda: NewYearClock()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_healthz(client):
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_requires_authentication(client):
    assert (await client.get(BASE)).status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert (await client.get(BASE, headers=bad)).status_code == 401
    assert (await client.get(BASE, headers=_auth(999))).status_code == 401


@pytest.mark.asyncio
async def test_conversation_flow(client, dispatcher):
    r = await client.get(f"{BASE}/counterparts/2", headers=_auth(1))
    assert r.status_code == 404

    r = await client.put(f"{BASE}/counterparts/2", headers=_auth(1))
    assert r.status_code == 200, r.text
    room = r.json()
    assert room["start_inclusive_log_id"] == -1
    room_id = room["id"]

    again = await client.put(f"{BASE}/counterparts/1", headers=_auth(2))
    assert again.json()["id"] == room_id
    assert (await client.get(f"{BASE}/counterparts/1", headers=_auth(2))).json() == {"room_id": room_id}

    r = await client.post(f"{BASE}/{room_id}/logs", json={"content": "hi"}, headers=_auth(1))
    assert r.status_code == 201, r.text
    l1 = r.json()["id"]
    r = await client.post(f"{BASE}/{room_id}/logs", json={"content": "hello"}, headers=_auth(2))
    l2 = r.json()["id"]
    assert l2 == l1 + 1
    assert [uid for uid, _ in dispatcher.sent] == [2, 1]

    r = await client.get(f"{BASE}/{room_id}", headers=_auth(2))
    assert r.json() == {"id": room_id, "start_inclusive_log_id": l1}

    r = await client.get(f"{BASE}/{room_id}/logs", headers=_auth(2))
    assert [(m["id"], m["content"]) for m in r.json()] == [(l2, "hello"), (l1, "hi")]
    assert r.json()[0]["date"] == 1767225600

    r = await client.put(f"{BASE}/{room_id}/hide-cursor", json={"log_id": l1}, headers=_auth(2))
    assert r.status_code == 204
    r = await client.get(f"{BASE}/{room_id}/logs", params={"direction": "after", "anchor": 0}, headers=_auth(2))
    assert [m["id"] for m in r.json()] == [l2]

    r = await client.get(BASE, headers=_auth(2))
    assert r.json() == [{
        "room_id": room_id,
        "counterpart_id": 1,
        "counterpart_name": "Alice",
        "last_log_id": l2,
        "hide_log_id": l1,
    }]

    assert (await client.get(f"{BASE}/{room_id}/counterpart", headers=_auth(2))).json() == {"counterpart_id": 1}
    assert (await client.get(f"{BASE}/{room_id}/membership", headers=_auth(3))).json() == {"is_member": False}

    r = await client.put(f"/api/v1/direct-message-logs/{l1}/like", json={"liked": True}, headers=_auth(2))
    assert r.status_code == 204
    r = await client.get(f"/api/v1/direct-message-logs/{l1}", headers=_auth(1))
    assert r.json()["is_liked"] is True

    r = await client.delete(f"{BASE}/{room_id}", headers=_auth(1))
    assert r.status_code == 204
    assert (await client.get(f"{BASE}/counterparts/2", headers=_auth(1))).status_code == 404
    assert (await client.get(f"/api/v1/direct-message-logs/{l1}", headers=_auth(1))).status_code == 404


@pytest.mark.asyncio
async def test_outsiders_are_forbidden(client):
    room_id = (await client.put(f"{BASE}/counterparts/2", headers=_auth(1))).json()["id"]
    log_id = (await client.post(f"{BASE}/{room_id}/logs", json={"content": "private"}, headers=_auth(1))).json()["id"]

    assert (await client.get(f"{BASE}/{room_id}/logs", headers=_auth(3))).status_code == 403
    assert (await client.post(f"{BASE}/{room_id}/logs", json={"content": "x"}, headers=_auth(3))).status_code == 403
    assert (await client.get(f"{BASE}/{room_id}", headers=_auth(3))).status_code == 403
    assert (await client.delete(f"{BASE}/{room_id}", headers=_auth(3))).status_code == 403
    assert (await client.get(f"/api/v1/direct-message-logs/{log_id}", headers=_auth(3))).status_code == 403


@pytest.mark.asyncio
async def test_invalid_requests(client):
    assert (await client.put(f"{BASE}/counterparts/1", headers=_auth(1))).status_code == 400
    assert (await client.put(f"{BASE}/counterparts/42", headers=_auth(1))).status_code == 404
    room_id = (await client.put(f"{BASE}/counterparts/2", headers=_auth(1))).json()["id"]
    assert (await client.post(f"{BASE}/{room_id}/logs", json={"content": ""}, headers=_auth(1))).status_code == 422
    assert (await client.get(f"{BASE}/{room_id}/logs", params={"limit": 0}, headers=_auth(1))).status_code == 422
    assert (await client.get(BASE, params={"direction": "sideways"}, headers=_auth(1))).status_code == 422


@pytest.mark.asyncio
async def test_blocked_room_is_hidden_from_listing(client, session_factory):
    room_id = (await client.put(f"{BASE}/counterparts/2", headers=_auth(1))).json()["id"]
    await client.post(f"{BASE}/{room_id}/logs", json={"content": "hi"}, headers=_auth(1))
    assert len((await client.get(BASE, headers=_auth(1))).json()) == 1

    async with session_factory() as s:
        s.add(UserRelationships(from_id=2, to_id=1, relationship=-1))
        await s.commit()
    assert (await client.get(BASE, headers=_auth(1))).json() == []


@pytest.mark.asyncio
async def test_oversized_limit_is_clamped_not_rejected(client):
    room_id = (await client.put(f"{BASE}/counterparts/2", headers=_auth(1))).json()["id"]
    for text in ("one", "two", "three"):
        await client.post(f"{BASE}/{room_id}/logs", json={"content": text}, headers=_auth(1))

    rooms = await client.get(BASE, params={"limit": 500}, headers=_auth(1))
    assert rooms.status_code == 200
    assert [r["room_id"] for r in rooms.json()] == [room_id]

    logs = await client.get(f"{BASE}/{room_id}/logs", params={"limit": 500}, headers=_auth(1))
    assert logs.status_code == 200
    assert 3 == len(logs.json()) <= 100
