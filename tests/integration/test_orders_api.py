import pytest

from backend.banks.resolver import AvailableBanks
from backend.errors import NoBankAvailable

ORDER_BODY = {
    "customer_name": "Sari",
    "customer_email": "sari@example.com",
    "customer_phone": "0812",
    "pickup_date": "2025-07-12",
    "items": [
        {"bundle_id": "k1", "quantity": 1},
        {"bundle_id": "k2", "quantity": 1},
        {"bundle_id": "k3", "quantity": 1},
    ],
}


@pytest.fixture
def catalog(monkeypatch, bundles_by_id, banks):
    inserted = []
    monkeypatch.setattr("backend.bundles.repository.get_bundles_map",
                        lambda ids: {i: bundles_by_id[i] for i in ids if i in bundles_by_id})
    monkeypatch.setattr("backend.orders.service.require_payment_banks", lambda: AvailableBanks(banks, False))

    def fake_insert(data):
        inserted.append(data)
        return {"id": "o1", **data}
    monkeypatch.setattr("backend.orders.repository.insert_order", fake_insert)
    return inserted


def test_quote_is_public_and_adds_fee_per_store(client, catalog):
    res = client.post("/api/v1/orders/quote", json={"items": ORDER_BODY["items"]})
    assert res.status_code == 200
    data = res.json()
    assert data["subtotal"] == 109000
    assert data["serviceFee"] == 50000
    assert data["total"] == 159000
    assert data["storeCount"] == 2
    assert catalog == []


def test_create_order_returns_order_with_bank(client, catalog):
    res = client.post("/api/v1/orders", json=dict(ORDER_BODY, bank_id="b2"))
    assert res.status_code == 201
    order = res.json()["order"]
    assert order["total_amount"] == 159000
    assert order["bank"]["id"] == "b2"
    assert order["order_status"] == "PENDING"
    assert order["user_id"] == "test-user"
    assert len(catalog) == 1


def test_create_order_without_bank_is_422(client, catalog, monkeypatch):
    def no_bank():
        raise NoBankAvailable(single_bank_mode=True)
    monkeypatch.setattr("backend.orders.service.require_payment_banks", no_bank)

    res = client.post("/api/v1/orders", json=ORDER_BODY)
    assert res.status_code == 422
    body = res.json()
    assert body["code"] == "no_bank_available"
    assert body["detail"] == "Aucun moyen de paiement configuré"
    assert catalog == []


def test_create_order_with_hidden_bundle_is_400(client, catalog):
    res = client.post("/api/v1/orders", json=dict(ORDER_BODY, items=[{"bundle_id": "hidden", "quantity": 1}]))
    assert res.status_code == 400
    assert res.json()["code"] == "validation_error"


@pytest.mark.parametrize("patch", [
    {"items": []},
    {"customer_email": "pas-un-email"},
    {"pickup_date": "12/07/2025"},
    {"customer_name": "   "},
])
def test_create_order_rejects_malformed_body(client, catalog, patch):
    res = client.post("/api/v1/orders", json=dict(ORDER_BODY, **patch))
    assert res.status_code == 422
    assert catalog == []


def test_create_order_requires_authentication(app, client, catalog):
    app.dependency_overrides.clear()
    res = client.post("/api/v1/orders", json=ORDER_BODY)
    assert res.status_code == 401
    assert catalog == []


def test_storage_outage_on_insert_is_500(client, catalog, monkeypatch):
    from backend.errors import StorageError

    def boom(data):
        raise StorageError("timeout")
    monkeypatch.setattr("backend.orders.repository.insert_order", boom)
    res = client.post("/api/v1/orders", json=ORDER_BODY)
    assert res.status_code == 500
    assert res.json()["code"] == "order_persistence_failed"


def test_other_customer_order_is_404(client, monkeypatch):
    monkeypatch.setattr("backend.orders.repository.get_order",
                        lambda oid: {"id": oid, "user_id": "someone-else", "order_status": "PENDING"})
    res = client.get("/api/v1/orders/o9")
    assert res.status_code == 404
    assert res.json()["code"] == "not_found"


def test_list_my_orders(client, monkeypatch):
    seen = {}

    def fake_list(**kwargs):
        seen.update(kwargs)
        return [{"id": "o1"}], 1
    monkeypatch.setattr("backend.orders.repository.list_orders", fake_list)
    res = client.get("/api/v1/orders?status=pending")
    assert res.status_code == 200
    assert res.json()["pagination"]["totalCount"] == 1
    assert seen["user_id"] == "test-user"
    assert res.headers["Cache-Control"].startswith("no-store")


def test_pickup_verify_requires_staff(client):
    res = client.post("/api/v1/pickup/verify/tok")
    assert res.status_code == 401


def test_pickup_verify_by_staff(authenticated_staff_client, monkeypatch):
    order = {"id": "o1", "order_status": "READY", "payment_status": "PAID", "pickup_verification_token": "tok"}
    monkeypatch.setattr("backend.orders.repository.get_order_by_pickup_token", lambda t: dict(order) if t == "tok" else None)
    monkeypatch.setattr("backend.orders.repository.get_order", lambda oid: dict(order))
    monkeypatch.setattr("backend.orders.repository.update_order", lambda oid, changes, expected=None: dict(order, **changes))

    res = authenticated_staff_client.post("/api/v1/pickup/verify/tok")
    assert res.status_code == 200
    assert res.json()["order"]["order_status"] == "COMPLETED"
