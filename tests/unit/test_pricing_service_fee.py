import pytest

from backend.errors import ValidationError
from backend.pricing import (
    OrderTotals,
    compute_order_total,
    compute_subtotal,
    count_distinct_stores,
    service_fee_for,
)


def test_two_stores_fee_and_total():
    totals = compute_order_total(109000, 2)
    assert totals == OrderTotals(subtotal=109000, service_fee=50000, total=159000)
    assert totals.as_response() == {"subtotal": 109000, "serviceFee": 50000, "total": 159000}


def test_single_store_zero_subtotal():
    totals = compute_order_total(0, 1)
    assert totals.service_fee == 25000
    assert totals.total == 25000


@pytest.mark.parametrize("stores", [1, 3, 7])
def test_fee_is_linear_in_store_count(stores):
    assert compute_order_total(10000, stores).service_fee == stores * 25000


def test_same_input_same_output():
    assert compute_order_total(84000, 2) == compute_order_total(84000, 2)


def test_negative_subtotal_rejected():
    with pytest.raises(ValidationError):
        compute_order_total(-1, 1)


def test_zero_store_count_rejected():
    with pytest.raises(ValidationError) as exc:
        compute_order_total(1000, 0)
    assert exc.value.details == {"field": "store_count"}


@pytest.mark.parametrize("subtotal, stores", [(True, 1), (1000.5, 1), ("1000", 1), (1000, 1.0), (1000, False)])
def test_non_integers_rejected(subtotal, stores):
    with pytest.raises(ValidationError):
        compute_order_total(subtotal, stores)


def test_service_fee_for_custom_rate():
    assert service_fee_for(3, per_store_fee=10000) == 30000


def test_subtotal_and_distinct_stores_from_lines():
    lines = [
        {"store_id": "s1", "quantity": 1, "unit_price": 42000},
        {"store_id": "s1", "quantity": 1, "unit_price": 25000},
        {"store_id": "s2", "quantity": 1, "unit_price": 42000},
    ]
    assert compute_subtotal(lines) == 109000
    assert count_distinct_stores(lines) == 2


@pytest.mark.parametrize("store_id", [None, ""])
def test_line_without_store_is_rejected(store_id):
    lines = [
        {"bundle_id": "k1", "store_id": "s1", "quantity": 1, "unit_price": 42000},
        {"bundle_id": "k9", "store_id": store_id, "quantity": 1, "unit_price": 10000},
    ]
    with pytest.raises(ValidationError) as exc:
        count_distinct_stores(lines)
    assert exc.value.details["field"] == "store_id"


def test_subtotal_rejects_zero_quantity():
    with pytest.raises(ValidationError):
        compute_subtotal([{"store_id": "s1", "quantity": 0, "unit_price": 1000}])
