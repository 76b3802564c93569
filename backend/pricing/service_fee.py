"""
Calcul des frais de service (pas de DB, pas de HTTP).

Chaque toko présent dans la commande implique un retrait séparé sur le lieu de
l'événement: les frais sont donc fixes par toko, et non par article.
Les montants sont des entiers en Rupiah (aucune sous-unité, aucun arrondi).
"""
from typing import Any, Dict, Iterable, NamedTuple, Optional

from backend.config import SERVICE_FEE_PER_STORE
from backend.errors import ValidationError


class OrderTotals(NamedTuple):
    """Décomposition monétaire d'une commande."""

    subtotal: int
    service_fee: int
    total: int

    def as_response(self) -> Dict[str, int]:
        return {"subtotal": self.subtotal, "serviceFee": self.service_fee, "total": self.total}


def _require_int(value: Any, name: str) -> int:
    # bool est un int en Python: on le refuse explicitement
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} doit être un entier", field=name)
    return value


def service_fee_for(store_count: int, per_store_fee: Optional[int] = None) -> int:
    store_count = _require_int(store_count, "store_count")
    if store_count < 1:
        raise ValidationError("store_count doit être >= 1", field="store_count")
    fee = SERVICE_FEE_PER_STORE if per_store_fee is None else per_store_fee
    return store_count * fee


def compute_order_total(subtotal: int, store_count: int) -> OrderTotals:
    """
    Calcule {subtotal, service_fee, total}.
    - service_fee = store_count × SERVICE_FEE_PER_STORE
    - total = subtotal + service_fee
    - ValidationError si subtotal < 0 ou store_count < 1 (pas de clamp silencieux)
    """
    subtotal = _require_int(subtotal, "subtotal")
    if subtotal < 0:
        raise ValidationError("subtotal ne peut pas être négatif", field="subtotal")
    fee = service_fee_for(store_count)
    return OrderTotals(subtotal=subtotal, service_fee=fee, total=subtotal + fee)


def compute_subtotal(lines: Iterable[Dict[str, Any]]) -> int:
    """Somme des lignes tarifées [{quantity, unit_price}, ...]."""
    total = 0
    for line in lines:
        qty = _require_int(line.get("quantity"), "quantity")
        price = _require_int(line.get("unit_price"), "unit_price")
        if qty < 1:
            raise ValidationError("quantity doit être >= 1", field="quantity")
        if price < 0:
            raise ValidationError("unit_price ne peut pas être négatif", field="unit_price")
        total += qty * price
    return total


def count_distinct_stores(lines: Iterable[Dict[str, Any]]) -> int:
    """Nombre de toko distincts représentés dans les lignes (store_id).
    Une ligne sans toko ne peut pas être facturée: ValidationError."""
    stores = set()
    for line in lines:
        store_id = line.get("store_id")
        if not store_id:
            raise ValidationError("Ligne sans toko", field="store_id", bundle_id=line.get("bundle_id"))
        stores.add(str(store_id))
    return len(stores)
