import pytest


@pytest.fixture
def inbox(monkeypatch):
    rows = [
        {"id": "n1", "user_id": "test-user", "type": "ORDER_READY", "is_read": False},
        {"id": "n2", "user_id": "test-user", "type": "ORDER_PLACED", "is_read": True},
    ]
    monkeypatch.setattr("backend.notifications.repository.list_notifications",
                        lambda uid, page=1, limit=20: ([r for r in rows if r["user_id"] == uid], len(rows)))
    monkeypatch.setattr("backend.notifications.repository.count_unread",
                        lambda uid: sum(1 for r in rows if r["user_id"] == uid and not r["is_read"]))

    def fake_mark(uid, nid=None):
        hits = [r for r in rows if r["user_id"] == uid and not r["is_read"] and (nid is None or r["id"] == nid)]
        for r in hits:
            r["is_read"] = True
        return len(hits)
    monkeypatch.setattr("backend.notifications.repository.mark_read", fake_mark)
    return rows


def test_list_notifications(client, inbox):
    res = client.get("/api/v1/notifications")
    assert res.status_code == 200
    data = res.json()
    assert [n["id"] for n in data["notifications"]] == ["n1", "n2"]
    assert data["unreadCount"] == 1
    assert data["hasMore"] is False
    assert res.headers["Cache-Control"].startswith("no-store")


def test_mark_one_then_all(client, inbox):
    assert client.patch("/api/v1/notifications", json={"notification_id": "n1"}).json() == {"updated": 1}
    assert client.patch("/api/v1/notifications", json={"mark_all_read": True}).json() == {"updated": 0}
    assert client.get("/api/v1/notifications").json()["unreadCount"] == 0


def test_mark_read_requires_target(client, inbox):
    res = client.patch("/api/v1/notifications", json={})
    assert res.status_code == 400
    assert res.json()["code"] == "validation_error"


def test_notifications_require_session(app, client):
    app.dependency_overrides.clear()
    assert client.get("/api/v1/notifications").status_code == 401


def test_admin_announcement(authenticated_admin_client, monkeypatch):
    sent = []
    monkeypatch.setattr("backend.notifications.repository.insert_notifications", sent.extend)
    res = authenticated_admin_client.post("/admin/api/notifications", json={
        "user_ids": ["u1", "u2"], "title": "Retrait", "message": "Le stand ouvre à 9h"})
    assert res.status_code == 201
    assert res.json() == {"sent": 2}
    assert {n["type"] for n in sent} == {"ANNOUNCEMENT"}


def test_staff_cannot_announce(authenticated_staff_client):
    res = authenticated_staff_client.post("/admin/api/notifications", json={
        "user_ids": ["u1"], "title": "x", "message": "y"})
    assert res.status_code in (401, 403)
