"""
Accès aux données du journal d'activité (table 'user_activity_logs').
Le journal est en ajout seul: aucune fonction de mise à jour ni de suppression.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

import backend.infra.supabase_client as supabase_client
from backend.errors import StorageError

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = "id, user_id, action, resource, resource_id, details, ip_address, user_agent, created_at"


def insert_activity(data: Dict[str, Any]) -> None:
    try:
        supabase_client.get_service_supabase().table("user_activity_logs").insert(data).execute()
    except Exception as e:
        logger.exception("audit.repository.insert_activity failed action=%s", data.get("action"))
        raise StorageError(str(e)) from e


def list_activity(
    *,
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    resource: Optional[str] = None,
    since: Optional[str] = None,
    until: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[dict], int]:
    """Entrées paginées, de la plus récente à la plus ancienne; retourne (entrées, total)."""
    query = (
        supabase_client.get_service_supabase()
        .table("user_activity_logs")
        .select(ACTIVITY_COLUMNS, count="exact")
    )
    if user_id:
        query = query.eq("user_id", user_id)
    if action:
        query = query.eq("action", action)
    if resource:
        query = query.eq("resource", resource)
    if since:
        query = query.gte("created_at", since)
    if until:
        query = query.lt("created_at", until)
    start = (page - 1) * limit
    try:
        res = query.order("created_at", desc=True).range(start, start + limit - 1).execute()
    except Exception as e:
        logger.exception("audit.repository.list_activity failed")
        raise StorageError(str(e)) from e
    rows = res.data or []
    total = getattr(res, "count", None)
    return rows, int(total) if total is not None else len(rows)
