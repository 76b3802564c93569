import pytest

import backend.bundles.service as svc
from backend.errors import NotFoundError, ValidationError

VISIBLE = {"id": "k1", "store_id": "s1", "price": 42000, "cost_price": 30000, "is_active": True, "show_to_customer": True}
HIDDEN = {"id": "k9", "store_id": "s1", "price": 1000, "cost_price": 500, "is_active": True, "show_to_customer": False}
INACTIVE = {"id": "k8", "store_id": "s1", "price": 1000, "cost_price": 500, "is_active": False, "show_to_customer": True}


@pytest.mark.parametrize("bundle, visible", [(VISIBLE, True), (HIDDEN, False), (INACTIVE, False)])
def test_customer_visibility(bundle, visible):
    assert svc.is_visible_to_customer(bundle) is visible


@pytest.mark.parametrize("user", [None, {"id": "u", "role": "customer"}])
def test_customer_cannot_open_hidden_bundle(monkeypatch, user):
    monkeypatch.setattr("backend.bundles.repository.get_bundle", lambda bid: dict(HIDDEN))
    with pytest.raises(NotFoundError):
        svc.get_bundle("k9", user)


@pytest.mark.parametrize("role", ["admin", "staff"])
def test_back_office_sees_hidden_bundle(monkeypatch, role):
    monkeypatch.setattr("backend.bundles.repository.get_bundle", lambda bid: dict(HIDDEN))
    assert svc.get_bundle("k9", {"id": "a", "role": role})["cost_price"] == 500


def test_customer_never_gets_cost_price(monkeypatch):
    monkeypatch.setattr("backend.bundles.repository.get_bundle", lambda bid: dict(VISIBLE))
    assert "cost_price" not in svc.get_bundle("k1", None)


def test_list_filters_by_role(monkeypatch):
    captured = []

    def fake_list(**kwargs):
        captured.append(kwargs)
        return [dict(VISIBLE)], 1
    monkeypatch.setattr("backend.bundles.repository.list_bundles", fake_list)

    public = svc.list_bundles(None, featured=True, store_id="s1", sort="price-low")
    assert captured[0]["customer_only"] is True
    assert captured[0]["featured"] is True
    assert captured[0]["store_id"] == "s1"
    assert "cost_price" not in public["bundles"][0]
    assert public["pagination"] == {"page": 1, "limit": 12, "total": 1, "pages": 1}

    svc.list_bundles({"id": "a", "role": "admin"})
    assert captured[1]["customer_only"] is False
    assert captured[1]["include_inactive"] is True


def test_list_rejects_unknown_sort():
    with pytest.raises(ValidationError):
        svc.list_bundles(None, sort="random")


def test_create_bundle_requires_existing_store(monkeypatch):
    monkeypatch.setattr("backend.stores.repository.get_store", lambda sid: None)
    with pytest.raises(ValidationError):
        svc.create_bundle({"store_id": "nope", "name": "X", "price": 1})


def test_update_bundle_without_changes(monkeypatch):
    monkeypatch.setattr("backend.bundles.repository.get_bundle", lambda bid: dict(VISIBLE))
    with pytest.raises(ValidationError):
        svc.update_bundle("k1", {"name": None})
