"""Integration tests for the notification endpoints and websocket."""

from __future__ import annotations

from datetime import date

import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import auth_headers, create_user
from kosthub.infrastructure.security import create_access_token


def test_requests_without_valid_token_are_unauthorized(client):
    missing = client.get("/notifications/")
    forged = client.get("/notifications/", headers={"Authorization": "Bearer nope"})

    assert missing.status_code == 401
    assert forged.status_code == 401
    assert forged.json()["detail"] == "Invalid credentials"


def test_inactive_user_gets_the_same_generic_error(client, session):
    sleeper = create_user(session, name="Sleeper", is_active=False)

    response = client.get("/notifications/", headers=auth_headers(sleeper))

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_test_notification_and_read_flow(client, tenant):
    headers = auth_headers(tenant)

    created = client.post("/notifications/test", headers=headers)
    assert created.status_code == 201
    body = created.json()
    assert body["title"] == "Test Notification"
    assert body["kind"] == "payment_reminder"
    assert body["is_read"] is False

    assert client.get("/notifications/unread/count", headers=headers).json() == {"count": 1}
    assert len(client.get("/notifications/unread", headers=headers).json()) == 1

    marked = client.patch(f"/notifications/{body['id']}/read", headers=headers)
    assert marked.status_code == 200
    assert marked.json() == {"count": 0}
    assert client.get("/notifications/", headers=headers).json()[0]["is_read"] is True


def test_mark_read_of_foreign_notification_is_not_found(client, tenant, session):
    created = client.post("/notifications/test", headers=auth_headers(tenant)).json()
    intruder = create_user(session, name="Intruder")

    response = client.patch(
        f"/notifications/{created['id']}/read", headers=auth_headers(intruder)
    )

    assert response.status_code == 404


def test_mark_all_read(client, tenant):
    headers = auth_headers(tenant)
    client.post("/notifications/test", headers=headers)
    client.post("/notifications/test", headers=headers)

    response = client.patch("/notifications/read-all", headers=headers)

    assert response.json() == {"updated": 2, "count": 0}


def test_trigger_reminders_is_admin_only(client, tenant, tenant_room, admin, monkeypatch):
    from kosthub.application.use_cases.notifications import reminders

    monkeypatch.setattr(reminders, "today_in_app_timezone", lambda: date(2025, 10, 5))

    forbidden = client.post(
        "/notifications/trigger-payment-reminders", headers=auth_headers(tenant)
    )
    assert forbidden.status_code == 403

    response = client.post(
        "/notifications/trigger-payment-reminders", headers=auth_headers(admin)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["sent"] == 1
    assert body["notified_user_ids"] == [tenant.id]
    assert (body["billing_month"], body["billing_year"]) == (10, 2025)


def test_websocket_rejects_bad_credentials(client):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/notifications/ws?token=garbage") as websocket:
            websocket.receive_json()

    assert excinfo.value.code == 1008
    assert client.app.state.hub.live_count() == 0


def test_websocket_closes_with_internal_error_when_auth_breaks(client, tenant, monkeypatch):
    from kosthub.interfaces.api.routes import notifications as notification_routes

    def broken_lookup(token, session):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(notification_routes, "resolve_current_user", broken_lookup)
    token = create_access_token(tenant.id)

    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
            websocket.receive_json()

    assert excinfo.value.code == 1011
    assert client.app.state.hub.live_count() == 0


def test_websocket_streams_events(client, tenant):
    token = create_access_token(tenant.id)
    hub = client.app.state.hub

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        assert websocket.receive_json() == {"type": "connected", "data": {"user_id": tenant.id}}
        assert websocket.receive_json() == {"type": "unread_count", "data": {"count": 0}}
        assert hub.live_count(tenant.id) == 1

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        created = client.post("/notifications/test", headers=auth_headers(tenant)).json()
        pushed = websocket.receive_json()
        assert pushed["type"] == "notification"
        assert pushed["data"]["id"] == created["id"]
        assert websocket.receive_json() == {"type": "unread_count", "data": {"count": 1}}

        websocket.send_json({"type": "mark_as_read", "id": created["id"]})
        assert websocket.receive_json() == {"type": "unread_count", "data": {"count": 0}}

        websocket.send_json({"type": "mark_as_read", "id": 9999})
        error = websocket.receive_json()
        assert error["type"] == "error"

        websocket.send_json({"type": "mark_all_as_read"})
        assert websocket.receive_json() == {"type": "unread_count", "data": {"count": 0}}

    assert hub.live_count(tenant.id) == 0
