"""Couche service des commandes.

Assemblage d'une commande (create_order):
1. Valide le panier (bundles existants, actifs et visibles côté client).
2. Tarifie chaque ligne avec le prix stocké du bundle (le prix envoyé par le client est ignoré).
3. Compte les toko distincts puis calcule sous-total, frais de service et total.
4. Résout les banques UNE fois; liste vide -> NoBankAvailable, rien n'est écrit.
5. Choisit la banque (celle demandée si elle fait partie de la liste, sinon la première).
6. Écrit la commande PENDING/PENDING en une seule insertion.

Cycle de vie: PENDING -> CONFIRMED -> PROCESSING -> READY -> COMPLETED,
CANCELLED depuis tout statut non terminal. Le passage à READY génère le jeton de retrait.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging
import secrets
import string
import time

from backend.banks.resolver import require_payment_banks
from backend.bundles import repository as bundles_repository
from backend.bundles.service import is_visible_to_customer
from backend.config import ORDER_NUMBER_PREFIX
from backend.errors import (
    ConflictError,
    InvalidTransition,
    NotFoundError,
    OrderPersistenceFailed,
    StorageError,
    ValidationError,
)
from backend.notifications import service as notifications
from backend.orders import repository
from backend.orders.models import (
    ORDER_TRANSITIONS,
    PAYMENT_METHOD_BANK_TRANSFER,
    OrderStatus,
    PaymentStatus,
)
from backend.pricing import OrderTotals, compute_order_total, compute_subtotal, count_distinct_stores
from backend.utils.qr import pickup_qr_code, token_from_qr_payload

logger = logging.getLogger(__name__)

_ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_order_number() -> str:
    """ORD-<8 derniers chiffres du timestamp ms>-<6 caractères aléatoires>."""
    stamp = str(int(time.time() * 1000))[-8:]
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(6))
    return f"{ORDER_NUMBER_PREFIX}-{stamp}-{suffix}"


def _item_value(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item.get(key)
    return getattr(item, key, None)


def _merge_cart(items: Iterable[Any]) -> Dict[str, int]:
    """{bundle_id: quantité}, les doublons sont additionnés dans l'ordre d'apparition."""
    merged: Dict[str, int] = {}
    for item in items or []:
        bundle_id = str(_item_value(item, "bundle_id") or "").strip()
        quantity = _item_value(item, "quantity")
        if not bundle_id:
            raise ValidationError("bundle_id requis", field="bundle_id")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Quantité invalide", field="quantity", bundle_id=bundle_id)
        merged[bundle_id] = merged.get(bundle_id, 0) + quantity
    if not merged:
        raise ValidationError("Le panier est vide", field="items")
    return merged


def _stored_price(bundle: Dict[str, Any]) -> int:
    price = bundle.get("price")
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    if isinstance(price, bool) or not isinstance(price, int):
        raise ValidationError("Prix du bundle invalide", bundle_id=bundle.get("id"))
    return price


def price_cart(items: Iterable[Any]) -> Tuple[List[Dict[str, Any]], OrderTotals, int]:
    """
    Tarifie un panier contre les bundles en base, sans rien écrire.
    Retourne (lignes, totaux, nombre de toko).
    """
    cart = _merge_cart(items)
    bundles = bundles_repository.get_bundles_map(list(cart.keys()))
    lines: List[Dict[str, Any]] = []
    for bundle_id, quantity in cart.items():
        bundle = bundles.get(bundle_id)
        if not bundle or not is_visible_to_customer(bundle):
            raise ValidationError("Bundle indisponible", field="items", bundle_id=bundle_id)
        unit_price = _stored_price(bundle)
        lines.append({
            "bundle_id": bundle_id,
            "name": bundle.get("name"),
            "store_id": bundle.get("store_id"),
            "quantity": quantity,
            "unit_price": unit_price,
            "total_price": unit_price * quantity,
        })
    store_count = count_distinct_stores(lines)
    totals = compute_order_total(compute_subtotal(lines), store_count)
    return lines, totals, store_count


def quote_cart(items: Iterable[Any]) -> Dict[str, Any]:
    lines, totals, store_count = price_cart(items)
    body = totals.as_response()
    body["storeCount"] = store_count
    body["items"] = lines
    return body


def _select_bank(banks: List[dict], requested_bank_id: Optional[str]) -> dict:
    if requested_bank_id:
        for bank in banks:
            if str(bank.get("id")) == str(requested_bank_id):
                return bank
        logger.info("Banque demandée %s hors de la liste résolue, banque %s retenue",
                    requested_bank_id, banks[0].get("id"))
    return banks[0]


def create_order(user: Dict[str, Any], request: Any) -> Dict[str, Any]:
    """
    Crée une commande PENDING/PENDING pour l'utilisateur.
    - ValidationError: panier invalide
    - NoBankAvailable / BankResolutionFailed: aucune banque utilisable, rien n'est écrit
    - OrderPersistenceFailed: l'insertion a échoué
    """
    lines, totals, store_count = price_cart(_item_value(request, "items"))

    available = require_payment_banks()
    bank = _select_bank(available.banks, _item_value(request, "bank_id"))

    payload = {
        "order_number": generate_order_number(),
        "user_id": user.get("id"),
        "customer_name": _item_value(request, "customer_name"),
        "customer_email": str(_item_value(request, "customer_email") or user.get("email") or ""),
        "customer_phone": _item_value(request, "customer_phone"),
        "items": lines,
        "store_count": store_count,
        "subtotal_amount": totals.subtotal,
        "service_fee": totals.service_fee,
        "total_amount": totals.total,
        "bank_id": bank.get("id"),
        "payment_method": PAYMENT_METHOD_BANK_TRANSFER,
        "order_status": OrderStatus.PENDING.value,
        "payment_status": PaymentStatus.PENDING.value,
        "pickup_date": _item_value(request, "pickup_date"),
        "notes": _item_value(request, "notes"),
    }
    try:
        order = repository.insert_order(payload)
    except StorageError as e:
        raise OrderPersistenceFailed() from e
    order = dict(order, bank=bank)
    logger.info(
        "Commande créée number=%s user_id=%s stores=%s total=%s bank_id=%s",
        payload["order_number"], payload["user_id"], store_count, totals.total, payload["bank_id"],
    )
    notifications.order_placed(order)
    return order


def _pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = (total + limit - 1) // limit if total else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCount": total,
        "hasNextPage": page < total_pages,
        "hasPreviousPage": page > 1,
    }


def _parse_statuses(raw: Optional[str], enum_cls) -> List[str]:
    if not raw:
        return []
    values = [s.strip().upper() for s in raw.split(",") if s.strip()]
    allowed = {e.value for e in enum_cls}
    unknown = [v for v in values if v not in allowed]
    if unknown:
        raise ValidationError("Statut inconnu", statuses=unknown)
    return values


def list_user_orders(user: Dict[str, Any], status: Optional[str] = None, payment_status: Optional[str] = None,
                     page: int = 1, limit: int = 10) -> Dict[str, Any]:
    rows, total = repository.list_orders(
        user_id=user.get("id"),
        order_statuses=_parse_statuses(status, OrderStatus),
        payment_statuses=_parse_statuses(payment_status, PaymentStatus),
        page=page,
        limit=limit,
    )
    return {"orders": rows, "pagination": _pagination(page, limit, total)}


def list_all_orders(status: Optional[str] = None, payment_status: Optional[str] = None,
                    search: Optional[str] = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
    rows, total = repository.list_orders(
        order_statuses=_parse_statuses(status, OrderStatus),
        payment_statuses=_parse_statuses(payment_status, PaymentStatus),
        search=(search or "").strip() or None,
        page=page,
        limit=limit,
    )
    return {"orders": rows, "pagination": _pagination(page, limit, total)}


def get_order(order_id: str) -> Dict[str, Any]:
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Commande introuvable", order_id=order_id)
    return order


def get_user_order(user: Dict[str, Any], order_id: str) -> Dict[str, Any]:
    """Commande du client; une commande d'un autre client est traitée comme introuvable."""
    order = repository.get_order(order_id)
    if not order or str(order.get("user_id")) != str(user.get("id")):
        raise NotFoundError("Commande introuvable", order_id=order_id)
    return order


def check_transition(current: str, target: OrderStatus) -> None:
    try:
        current_status = OrderStatus(current)
    except ValueError:
        raise InvalidTransition(f"Statut actuel inconnu: {current}") from None
    if target not in ORDER_TRANSITIONS[current_status]:
        raise InvalidTransition(current=current_status.value, target=target.value)


def status_snapshot(order: Dict[str, Any]) -> Dict[str, Any]:
    """Statuts lus avant écriture, à repasser en `expected` à save_order_changes."""
    return {k: order[k] for k in ("order_status", "payment_status") if order.get(k)}


def save_order_changes(order_id: str, changes: Dict[str, Any],
                       expected: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Écrit les changements. Avec `expected`, l'écriture n'a lieu que si la ligne
    porte encore ces statuts; sinon ConflictError (une autre requête est passée avant).
    """
    changes["updated_at"] = _now_iso()
    try:
        updated = repository.update_order(order_id, changes, expected=expected)
    except StorageError as e:
        raise OrderPersistenceFailed("Impossible de mettre à jour la commande") from e
    if not updated:
        if expected:
            logger.warning("Écriture concurrente sur la commande %s, attendu=%s", order_id, expected)
            raise ConflictError("La commande a été modifiée entre-temps", order_id=order_id)
        raise NotFoundError("Commande introuvable", order_id=order_id)
    return updated


def transition_order_status(order_id: str, status: Any, notes: Optional[str] = None) -> Dict[str, Any]:
    """Applique une transition du graphe; InvalidTransition sinon."""
    try:
        target = OrderStatus(status)
    except ValueError:
        raise ValidationError("Statut inconnu", field="status") from None
    order = get_order(order_id)
    check_transition(order.get("order_status"), target)
    changes: Dict[str, Any] = {"order_status": target.value}
    if target is OrderStatus.READY and not order.get("pickup_verification_token"):
        changes["pickup_verification_token"] = secrets.token_urlsafe(24)
    if notes:
        changes["notes"] = notes
    updated = save_order_changes(order_id, changes, expected=status_snapshot(order))
    logger.info("Commande %s: %s -> %s", order.get("order_number"), order.get("order_status"), target.value)
    notifications.order_status_changed(updated)
    return updated


def cancel_order(user: Dict[str, Any], order_id: str) -> Dict[str, Any]:
    """Annulation par le client: uniquement une commande PENDING non payée."""
    order = get_user_order(user, order_id)
    if order.get("order_status") != OrderStatus.PENDING.value:
        raise ConflictError("Seules les commandes en attente peuvent être annulées", order_id=order_id)
    if order.get("payment_status") == PaymentStatus.PAID.value:
        raise ConflictError("Une commande payée ne peut pas être annulée", order_id=order_id)
    updated = save_order_changes(order_id, {"order_status": OrderStatus.CANCELLED.value},
                                 expected=status_snapshot(order))
    logger.info("Commande annulée par le client number=%s", order.get("order_number"))
    notifications.order_status_changed(updated)
    return updated


def pickup_qr(user: Dict[str, Any], order_id: str) -> Dict[str, Any]:
    """QR code de retrait (PNG en data URL) pour une commande READY du client."""
    order = get_user_order(user, order_id)
    token = order.get("pickup_verification_token")
    if order.get("order_status") != OrderStatus.READY.value or not token:
        raise ConflictError("La commande n'est pas prête pour le retrait", order_id=order_id)
    return {"orderNumber": order.get("order_number"), "qrCode": pickup_qr_code(token)}


def verify_pickup(token: str, staff: Dict[str, Any]) -> Dict[str, Any]:
    """Scan du QR au point de retrait: READY -> COMPLETED."""
    order = repository.get_order_by_pickup_token(token_from_qr_payload(token))
    if not order:
        raise NotFoundError("Jeton de retrait invalide")
    check_transition(order.get("order_status"), OrderStatus.COMPLETED)
    updated = save_order_changes(order["id"], {"order_status": OrderStatus.COMPLETED.value},
                                 expected=status_snapshot(order))
    logger.info("Retrait validé number=%s staff_id=%s", order.get("order_number"), staff.get("id"))
    notifications.order_status_changed(updated)
    return updated
