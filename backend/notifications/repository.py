"""Accès aux données des notifications in-app (table 'in_app_notifications')."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import logging

import backend.infra.supabase_client as supabase_client
from backend.errors import StorageError

logger = logging.getLogger(__name__)

NOTIFICATION_COLUMNS = "id, user_id, type, title, message, data, is_read, read_at, created_at"


def insert_notifications(rows: List[Dict[str, Any]]) -> None:
    if not rows:
        return
    try:
        supabase_client.get_service_supabase().table("in_app_notifications").insert(rows).execute()
    except Exception as e:
        logger.exception("notifications.repository.insert_notifications failed count=%s", len(rows))
        raise StorageError(str(e)) from e


def list_notifications(user_id: str, page: int = 1, limit: int = 20) -> Tuple[List[dict], int]:
    start = (page - 1) * limit
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("in_app_notifications")
            .select(NOTIFICATION_COLUMNS, count="exact")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(start, start + limit - 1)
            .execute()
        )
    except Exception as e:
        logger.exception("notifications.repository.list_notifications failed user_id=%s", user_id)
        raise StorageError(str(e)) from e
    rows = res.data or []
    total = getattr(res, "count", None)
    return rows, int(total) if total is not None else len(rows)


def count_unread(user_id: str) -> int:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("in_app_notifications")
            .select("id", count="exact")
            .eq("user_id", user_id)
            .eq("is_read", False)
            .execute()
        )
    except Exception as e:
        logger.exception("notifications.repository.count_unread failed user_id=%s", user_id)
        raise StorageError(str(e)) from e
    count = getattr(res, "count", None)
    return count if isinstance(count, int) else len(res.data or [])


def mark_read(user_id: str, notification_id: Optional[str] = None) -> int:
    """Marque comme lues les notifications non lues de l'utilisateur (une seule si notification_id)."""
    query = (
        supabase_client.get_service_supabase()
        .table("in_app_notifications")
        .update({"is_read": True, "read_at": datetime.now(timezone.utc).isoformat()})
        .eq("user_id", user_id)
        .eq("is_read", False)
    )
    if notification_id:
        query = query.eq("id", notification_id)
    try:
        res = query.execute()
    except Exception as e:
        logger.exception("notifications.repository.mark_read failed user_id=%s id=%s", user_id, notification_id)
        raise StorageError(str(e)) from e
    rows = getattr(res, "data", None) or []
    return len(rows) if isinstance(rows, list) else 0


def find_admin_ids() -> List[str]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("users")
            .select("id")
            .eq("role", "admin")
            .execute()
        )
    except Exception as e:
        logger.exception("notifications.repository.find_admin_ids failed")
        raise StorageError(str(e)) from e
    return [str(r["id"]) for r in (res.data or []) if r.get("id")]
