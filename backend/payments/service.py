"""
Cas d'usage 'payments': statut de paiement des commandes par virement bancaire.

Graphe: PENDING -> PAID | FAILED, PAID -> REFUNDED.
Effets sur la commande:
- PAID: une commande PENDING passe CONFIRMED (refusé si la commande est annulée)
- FAILED: une commande non terminale passe CANCELLED
- REFUNDED: une commande non terminale passe CANCELLED (refusé si COMPLETED)
"""
from typing import Any, Dict, FrozenSet, Optional
import logging

from backend.errors import ConflictError, InvalidTransition, ValidationError
from backend.notifications import service as notifications
from backend.orders import service as orders_service
from backend.orders.models import ORDER_TRANSITIONS, OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)

PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}

_PROVIDER_STATUSES = {
    "success": PaymentStatus.PAID,
    "completed": PaymentStatus.PAID,
    "paid": PaymentStatus.PAID,
    "failed": PaymentStatus.FAILED,
    "error": PaymentStatus.FAILED,
    "refunded": PaymentStatus.REFUNDED,
}


def map_provider_status(raw: Optional[str]) -> PaymentStatus:
    """Statut brut d'un prestataire -> PaymentStatus (inconnu => PENDING)."""
    return _PROVIDER_STATUSES.get(str(raw or "").strip().lower(), PaymentStatus.PENDING)


def _is_terminal(order_status: Optional[str]) -> bool:
    try:
        return not ORDER_TRANSITIONS[OrderStatus(order_status)]
    except ValueError:
        return False


def update_payment_status(order_id: str, status: Any, notes: Optional[str] = None) -> Dict[str, Any]:
    try:
        target = PaymentStatus(status)
    except ValueError:
        raise ValidationError("Statut de paiement inconnu", field="status") from None

    order = orders_service.get_order(order_id)
    current = PaymentStatus(order.get("payment_status") or PaymentStatus.PENDING.value)
    if target not in PAYMENT_TRANSITIONS[current]:
        raise InvalidTransition(current=current.value, target=target.value)

    order_status = order.get("order_status")
    changes: Dict[str, Any] = {"payment_status": target.value}
    if target is PaymentStatus.PAID:
        if order_status == OrderStatus.CANCELLED.value:
            raise ConflictError("La commande est annulée", order_id=order_id)
        if order_status == OrderStatus.PENDING.value:
            changes["order_status"] = OrderStatus.CONFIRMED.value
    elif target is PaymentStatus.REFUNDED and order_status == OrderStatus.COMPLETED.value:
        raise ConflictError("Commande déjà retirée, remboursement impossible", order_id=order_id)
    elif not _is_terminal(order_status):
        changes["order_status"] = OrderStatus.CANCELLED.value
    if notes:
        changes["notes"] = notes

    updated = orders_service.save_order_changes(order_id, changes,
                                                expected=orders_service.status_snapshot(order))
    logger.info(
        "Paiement commande %s: %s -> %s (commande %s)",
        order.get("order_number"), current.value, target.value, changes.get("order_status", order_status),
    )
    notifications.payment_status_changed(updated)
    return updated


def upload_payment_proof(user: Dict[str, Any], order_id: str, proof_url: str) -> Dict[str, Any]:
    """Preuve de virement: commande du client, en attente, paiement en attente."""
    proof_url = (proof_url or "").strip()
    if not proof_url.startswith(("https://", "http://")):
        raise ValidationError("URL de preuve invalide", field="payment_proof_url")
    order = orders_service.get_user_order(user, order_id)
    if order.get("order_status") != OrderStatus.PENDING.value \
            or order.get("payment_status") != PaymentStatus.PENDING.value:
        raise ConflictError("La commande n'attend plus de paiement", order_id=order_id)
    return orders_service.save_order_changes(order_id, {"payment_proof_url": proof_url},
                                            expected=orders_service.status_snapshot(order))
