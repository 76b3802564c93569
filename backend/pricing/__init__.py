"""
Module 'pricing' (feature-first): calcul pur des montants d'une commande.
"""

from .service_fee import (
    OrderTotals,
    compute_order_total,
    compute_subtotal,
    count_distinct_stores,
    service_fee_for,
)

__all__ = [
    "OrderTotals",
    "compute_order_total",
    "compute_subtotal",
    "count_distinct_stores",
    "service_fee_for",
]
