"""
Notifications in-app.

Les notifications sont envoyées après une écriture réussie sur une commande.
L'envoi ne fait jamais échouer l'opération qui le déclenche: une panne est
loguée et la notification est perdue.
- Client: commande enregistrée, changements de statut, paiement.
- Admins: nouvelle commande (NEW_ORDER).
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from backend.errors import StorageError, ValidationError
from backend.notifications import repository
from backend.notifications.models import NotificationType

logger = logging.getLogger(__name__)

_ORDER_STATUS_MESSAGES: Dict[str, Tuple[NotificationType, str, str]] = {
    "CONFIRMED": (NotificationType.ORDER_CONFIRMED, "Commande confirmée",
                  "La commande #{number} est confirmée"),
    "READY": (NotificationType.ORDER_READY, "Commande prête",
              "La commande #{number} est prête: présentez le QR code au point de retrait"),
    "COMPLETED": (NotificationType.ORDER_COMPLETED, "Commande retirée",
                  "La commande #{number} a été retirée. Merci !"),
    "CANCELLED": (NotificationType.ORDER_CANCELLED, "Commande annulée",
                  "La commande #{number} a été annulée"),
}

_PAYMENT_STATUS_MESSAGES: Dict[str, Tuple[NotificationType, str, str]] = {
    "PAID": (NotificationType.PAYMENT_CONFIRMED, "Paiement reçu",
             "Le virement de la commande #{number} est validé"),
    "FAILED": (NotificationType.PAYMENT_FAILED, "Paiement refusé",
               "Le virement de la commande #{number} n'a pas pu être validé"),
    "REFUNDED": (NotificationType.PAYMENT_REFUNDED, "Commande remboursée",
                 "La commande #{number} a été remboursée"),
}


def _send(user_ids: Iterable[str], type_: NotificationType, title: str, message: str,
          data: Optional[Dict[str, Any]] = None) -> int:
    rows = [
        {"user_id": uid, "type": type_.value, "title": title, "message": message,
         "data": data or {}, "is_read": False}
        for uid in dict.fromkeys(str(u) for u in user_ids if u)
    ]
    if not rows:
        return 0
    try:
        repository.insert_notifications(rows)
    except StorageError:
        logger.warning("Notification %s non envoyée à %s destinataire(s)", type_.value, len(rows))
        return 0
    return len(rows)


def notify_user(user_id: Optional[str], type_: NotificationType, title: str, message: str,
                data: Optional[Dict[str, Any]] = None) -> bool:
    return _send([user_id] if user_id else [], type_, title, message, data) == 1


def notify_admins(type_: NotificationType, title: str, message: str,
                  data: Optional[Dict[str, Any]] = None) -> int:
    try:
        admin_ids = repository.find_admin_ids()
    except StorageError:
        logger.warning("Notification %s: liste des admins indisponible", type_.value)
        return 0
    return _send(admin_ids, type_, title, message, data)


def _order_data(order: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "orderId": order.get("id"),
        "orderNumber": order.get("order_number"),
        "customerName": order.get("customer_name"),
        "orderStatus": order.get("order_status"),
        "paymentStatus": order.get("payment_status"),
        "totalAmount": order.get("total_amount"),
    }


def order_placed(order: Dict[str, Any]) -> None:
    number = order.get("order_number")
    data = _order_data(order)
    notify_user(order.get("user_id"), NotificationType.ORDER_PLACED, "Commande enregistrée",
                f"La commande #{number} est enregistrée, en attente du virement", data)
    notify_admins(NotificationType.NEW_ORDER, "Nouvelle commande",
                  f"Nouvelle commande #{number} de {order.get('customer_name') or 'un client'}", data)


def order_status_changed(order: Dict[str, Any]) -> None:
    entry = _ORDER_STATUS_MESSAGES.get(order.get("order_status") or "")
    if entry:
        type_, title, message = entry
        notify_user(order.get("user_id"), type_, title,
                    message.format(number=order.get("order_number")), _order_data(order))


def payment_status_changed(order: Dict[str, Any]) -> None:
    entry = _PAYMENT_STATUS_MESSAGES.get(order.get("payment_status") or "")
    if entry:
        type_, title, message = entry
        notify_user(order.get("user_id"), type_, title,
                    message.format(number=order.get("order_number")), _order_data(order))


def announce(user_ids: List[str], title: str, message: str) -> Dict[str, int]:
    """Message libre d'un admin à une liste d'utilisateurs."""
    return {"sent": _send(user_ids, NotificationType.ANNOUNCEMENT, title.strip(), message.strip())}


def list_for_user(user: Dict[str, Any], page: int = 1, limit: int = 20) -> Dict[str, Any]:
    rows, total = repository.list_notifications(user.get("id"), page=page, limit=limit)
    return {
        "notifications": rows,
        "total": total,
        "unreadCount": repository.count_unread(user.get("id")),
        "hasMore": total > page * limit,
    }


def mark_read(user: Dict[str, Any], notification_id: Optional[str] = None, mark_all: bool = False) -> Dict[str, int]:
    """Une notification (notification_id) ou toutes (mark_all); ValidationError sinon."""
    if mark_all:
        return {"updated": repository.mark_read(user.get("id"))}
    if not notification_id:
        raise ValidationError("notification_id ou mark_all_read requis", field="notification_id")
    return {"updated": repository.mark_read(user.get("id"), notification_id)}
