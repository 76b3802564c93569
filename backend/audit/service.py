"""
Journal d'activité: qui a fait quoi, sur quelle ressource, depuis quelle adresse.

record() est appelé par les routes après une écriture réussie. Il n'échoue
jamais: une panne du journal est loguée et l'opération métier reste valide.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
import logging

from fastapi import Request

from backend.audit import repository
from backend.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

CREATE_ORDER = "CREATE_ORDER"
CANCEL_ORDER = "CANCEL_ORDER"
UPDATE_ORDER_STATUS = "UPDATE_ORDER_STATUS"
UPDATE_PAYMENT_STATUS = "UPDATE_PAYMENT_STATUS"
UPLOAD_PAYMENT_PROOF = "UPLOAD_PAYMENT_PROOF"
VERIFY_PICKUP = "VERIFY_PICKUP"
CREATE_BANK = "CREATE_BANK"
UPDATE_BANK = "UPDATE_BANK"
DELETE_BANK = "DELETE_BANK"
UPDATE_SETTINGS = "UPDATE_SETTINGS"
UPDATE_USER_ROLE = "UPDATE_USER_ROLE"

_IP_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip", "true-client-ip")
DATE_RANGES = ("all", "today", "yesterday", "week", "month")


def client_ip(request: Optional[Request]) -> str:
    if request is None:
        return "unknown"
    for header in _IP_HEADERS:
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def record(
    user: Optional[Dict[str, Any]],
    action: str,
    resource: str,
    resource_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> bool:
    """Ajoute une entrée au journal; False si l'écriture a échoué."""
    entry = {
        "user_id": (user or {}).get("id"),
        "action": action,
        "resource": resource,
        "resource_id": str(resource_id) if resource_id is not None else None,
        "details": details or None,
        "ip_address": client_ip(request),
        "user_agent": (request.headers.get("user-agent") if request is not None else None) or "unknown",
    }
    try:
        repository.insert_activity(entry)
    except StorageError:
        logger.warning("Journal d'activité indisponible, entrée perdue action=%s resource_id=%s",
                       action, entry["resource_id"])
        return False
    return True


def _date_bounds(date_range: str, now: Optional[datetime] = None) -> Tuple[Optional[str], Optional[str]]:
    """Bornes [since, until) en UTC pour today / yesterday / week (depuis lundi) / month."""
    if date_range not in DATE_RANGES:
        raise ValidationError("Période inconnue", field="date_range")
    if date_range == "all":
        return None, None
    now = now or datetime.now(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range == "today":
        return today.isoformat(), None
    if date_range == "yesterday":
        return (today - timedelta(days=1)).isoformat(), today.isoformat()
    if date_range == "week":
        return (today - timedelta(days=today.weekday())).isoformat(), None
    return today.replace(day=1).isoformat(), None


def list_logs(
    *,
    action: Optional[str] = None,
    resource: Optional[str] = None,
    user_id: Optional[str] = None,
    date_range: str = "all",
    page: int = 1,
    limit: int = 50,
) -> Dict[str, Any]:
    since, until = _date_bounds(date_range)
    rows, total = repository.list_activity(
        user_id=user_id,
        action=(action or "").strip().upper() or None,
        resource=(resource or "").strip().lower() or None,
        since=since,
        until=until,
        page=page,
        limit=limit,
    )
    return {"logs": rows, "total": total, "hasMore": total > page * limit, "page": page, "limit": limit}
