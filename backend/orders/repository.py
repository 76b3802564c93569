"""
Accès aux données des commandes (table 'orders').

Une commande est écrite en UNE insertion: les lignes sont un instantané JSON
(colonne 'items'), les montants et la banque sont des colonnes de la même ligne.
Une commande à moitié écrite ne peut donc pas exister.
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

import backend.infra.supabase_client as supabase_client
from backend.errors import StorageError

logger = logging.getLogger(__name__)

ORDER_COLUMNS = (
    "id, order_number, user_id, customer_name, customer_email, customer_phone, items, "
    "store_count, subtotal_amount, service_fee, total_amount, bank_id, payment_method, "
    "order_status, payment_status, payment_proof_url, pickup_date, pickup_verification_token, "
    "notes, created_at, updated_at, banks(id, name, code, account_number, account_name)"
)


def insert_order(data: Dict[str, Any]) -> dict:
    """Insère la commande via la clé de service. StorageError si l'insertion échoue."""
    try:
        res = supabase_client.get_service_supabase().table("orders").insert(data).execute()
    except Exception as e:
        logger.exception("orders.repository.insert_order failed order_number=%s", data.get("order_number"))
        raise StorageError(str(e)) from e
    rows = getattr(res, "data", None) or []
    if not rows:
        raise StorageError("insert_order: aucune ligne retournée")
    return rows[0]


def get_order(order_id: str) -> Optional[dict]:
    if not order_id:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.get_order failed id=%s", order_id)
        raise StorageError(str(e)) from e
    rows = res.data or []
    return rows[0] if rows else None


def get_order_by_pickup_token(token: str) -> Optional[dict]:
    if not token:
        return None
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select(ORDER_COLUMNS)
            .eq("pickup_verification_token", token)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.get_order_by_pickup_token failed")
        raise StorageError(str(e)) from e
    rows = res.data or []
    return rows[0] if rows else None


def list_orders(
    *,
    user_id: Optional[str] = None,
    order_statuses: Optional[Iterable[str]] = None,
    payment_statuses: Optional[Iterable[str]] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[dict], int]:
    """Liste paginée (created_at décroissant); retourne (commandes, total).
    - user_id: restreint aux commandes d'un client.
    - search: numéro de commande, nom ou email client.
    """
    query = supabase_client.get_service_supabase().table("orders").select(ORDER_COLUMNS, count="exact")
    if user_id:
        query = query.eq("user_id", user_id)
    statuses = [s for s in (order_statuses or []) if s]
    if statuses:
        query = query.in_("order_status", statuses)
    pay_statuses = [s for s in (payment_statuses or []) if s]
    if pay_statuses:
        query = query.in_("payment_status", pay_statuses)
    if search:
        term = search.replace(",", " ").strip()
        query = query.or_(
            f"order_number.ilike.%{term}%,customer_name.ilike.%{term}%,customer_email.ilike.%{term}%"
        )
    start = (page - 1) * limit
    try:
        res = query.order("created_at", desc=True).range(start, start + limit - 1).execute()
    except Exception as e:
        logger.exception("orders.repository.list_orders failed user_id=%s", user_id)
        raise StorageError(str(e)) from e
    rows = res.data or []
    total = getattr(res, "count", None)
    return rows, int(total) if total is not None else len(rows)


def update_order(order_id: str, data: Dict[str, Any], expected: Optional[Dict[str, Any]] = None) -> Optional[dict]:
    """
    Met à jour la commande. `expected` ({colonne: valeur}) conditionne l'écriture
    à l'état lu par l'appelant: si la ligne a changé entre-temps, aucune ligne n'est retournée.
    """
    query = supabase_client.get_service_supabase().table("orders").update(data).eq("id", order_id)
    for column, value in (expected or {}).items():
        query = query.eq(column, value)
    try:
        res = query.execute()
    except Exception as e:
        logger.exception("orders.repository.update_order failed id=%s data=%s", order_id, data)
        raise StorageError(str(e)) from e
    rows = getattr(res, "data", None) or []
    return rows[0] if rows else None


def order_stats() -> Dict[str, Any]:
    """Compteurs pour le tableau de bord admin: nombre par statut et CA encaissé (PAID)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("order_status, payment_status, total_amount, service_fee")
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.order_stats failed")
        raise StorageError(str(e)) from e
    rows = res.data or []
    by_status: Dict[str, int] = {}
    revenue = 0
    fees = 0
    for r in rows:
        status = r.get("order_status") or "UNKNOWN"
        by_status[status] = by_status.get(status, 0) + 1
        if r.get("payment_status") == "PAID":
            revenue += int(r.get("total_amount") or 0)
            fees += int(r.get("service_fee") or 0)
    return {"total_orders": len(rows), "by_status": by_status, "paid_revenue": revenue, "paid_service_fees": fees}
