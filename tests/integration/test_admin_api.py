import pytest


@pytest.fixture
def order_row(monkeypatch):
    state = {"id": "o1", "order_number": "ORD-1", "user_id": "test-user",
             "order_status": "PENDING", "payment_status": "PENDING"}
    monkeypatch.setattr("backend.orders.repository.get_order", lambda oid: dict(state) if oid == "o1" else None)

    def fake_update(oid, changes, expected=None):
        state.update(changes)
        return dict(state)
    monkeypatch.setattr("backend.orders.repository.update_order", fake_update)
    return state


def test_admin_api_requires_session(app, client):
    app.dependency_overrides.clear()
    assert client.get("/admin/api/stats").status_code == 401
    assert client.put("/admin/api/orders/o1/payment-status", json={"status": "PAID"}).status_code == 401


def test_stats_for_staff(authenticated_staff_client, monkeypatch):
    monkeypatch.setattr("backend.admin.service.get_stats", lambda: {"users": 3, "orders": {"total_orders": 1}})
    res = authenticated_staff_client.get("/admin/api/stats")
    assert res.status_code == 200
    assert res.json()["users"] == 3


def test_staff_cannot_write_banks(app, authenticated_staff_client):
    # require_admin n'est pas surchargé pour le staff: aucune session -> 401
    res = authenticated_staff_client.post("/admin/api/banks", json={
        "name": "BCA", "code": "bca", "account_number": "1", "account_name": "Perdami"})
    assert res.status_code in (401, 403)


def test_payment_paid_confirms_order(authenticated_admin_client, order_row):
    res = authenticated_admin_client.put("/admin/api/orders/o1/payment-status", json={"status": "PAID"})
    assert res.status_code == 200
    order = res.json()["order"]
    assert order["payment_status"] == "PAID"
    assert order["order_status"] == "CONFIRMED"


def test_unknown_payment_status_is_422(authenticated_admin_client, order_row):
    res = authenticated_admin_client.put("/admin/api/orders/o1/payment-status", json={"status": "LOST"})
    assert res.status_code == 422


def test_illegal_order_transition_is_409(authenticated_staff_client, order_row):
    res = authenticated_staff_client.put("/admin/api/orders/o1/status", json={"status": "COMPLETED"})
    assert res.status_code == 409
    assert res.json()["code"] == "invalid_transition"
    assert order_row["order_status"] == "PENDING"


def test_order_status_on_missing_order(authenticated_staff_client, order_row):
    res = authenticated_staff_client.put("/admin/api/orders/nope/status", json={"status": "CONFIRMED"})
    assert res.status_code == 404


def test_create_bank_uppercases_code(authenticated_admin_client, monkeypatch):
    captured = {}
    monkeypatch.setattr("backend.banks.repository.get_bank_by_code", lambda code: None)

    def fake_create(data):
        captured.update(data)
        return {"id": "b9", **data}
    monkeypatch.setattr("backend.banks.repository.insert_bank", fake_create)

    res = authenticated_admin_client.post("/admin/api/banks", json={
        "name": "BRI", "code": " bri ", "account_number": "0099", "account_name": "Perdami", "logo": "  "})
    assert res.status_code == 201
    assert captured["code"] == "BRI"
    assert captured["logo"] is None


def test_toggle_single_bank_mode(authenticated_admin_client, monkeypatch):
    seen = {}

    def fake_toggle(enabled, default_bank_id=None):
        seen.update(enabled=enabled, default_bank_id=default_bank_id)
        return {"single_bank_mode": enabled, "default_bank_id": default_bank_id or "b1"}
    monkeypatch.setattr("backend.banks.service.toggle_single_bank_mode", fake_toggle)

    res = authenticated_admin_client.post("/admin/api/settings/single-bank/toggle", json={"enabled": True})
    assert res.status_code == 200
    assert res.json()["settings"]["default_bank_id"] == "b1"
    assert seen == {"enabled": True, "default_bank_id": None}


def test_update_settings_partial(authenticated_admin_client, monkeypatch):
    saved = []
    monkeypatch.setattr("backend.app_settings.repository.upsert_app_settings",
                        lambda data: saved.append(data) or {"id": "default", **data})
    res = authenticated_admin_client.put("/admin/api/settings", json={"is_maintenance_mode": True})
    assert res.status_code == 200
    assert saved == [{"is_maintenance_mode": True}]


def test_update_user_role(authenticated_admin_client, monkeypatch):
    monkeypatch.setattr("backend.admin.service.update_user_role",
                        lambda uid, role, admin: {"id": uid, "role": role, "by": admin["id"]})
    res = authenticated_admin_client.put("/admin/api/users/u1/role", json={"role": "staff"})
    assert res.status_code == 200
    assert res.json()["user"] == {"id": "u1", "role": "staff", "by": "admin-user-id"}


def test_delete_store_with_bundles_is_409(authenticated_admin_client, monkeypatch):
    monkeypatch.setattr("backend.stores.repository.get_store", lambda sid: {"id": sid, "is_active": True})
    monkeypatch.setattr("backend.stores.repository.count_bundles_for_store", lambda sid: 2)
    res = authenticated_admin_client.delete("/admin/api/stores/s1")
    assert res.status_code == 409


@pytest.mark.parametrize("raw", ["paid", "success", "Completed"])
def test_payment_status_accepts_provider_aliases(authenticated_admin_client, order_row, raw):
    res = authenticated_admin_client.put("/admin/api/orders/o1/payment-status", json={"status": raw})
    assert res.status_code == 200
    assert res.json()["order"]["payment_status"] == "PAID"
