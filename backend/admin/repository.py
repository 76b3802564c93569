from typing import List, Optional, Dict, Any, Tuple
from backend.infra.supabase_client import get_service_supabase
import logging

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, email, name, phone, role, created_at"

# module backend.admin.repository
def list_users(search: Optional[str] = None, role: Optional[str] = None, page: int = 1, limit: int = 20) -> Tuple[List[dict], int]:
    """
    Utilisateurs pour l'admin (table users), created_at décroissant; retourne (users, total).
    """
    try:
        query = get_service_supabase().table("users").select(USER_COLUMNS, count="exact")
        if role:
            query = query.eq("role", role)
        if search:
            term = search.replace(",", " ").strip()
            query = query.or_(f"email.ilike.%{term}%,name.ilike.%{term}%")
        start = (page - 1) * limit
        res = query.order("created_at", desc=True).range(start, start + limit - 1).execute()
        rows = res.data or []
        total = getattr(res, "count", None)
        return rows, int(total) if total is not None else len(rows)
    except Exception:
        logger.exception("admin.repository.list_users failed")
        return [], 0


def get_user(user_id: str) -> Optional[dict]:
    if not user_id:
        return None
    try:
        res = get_service_supabase().table("users").select(USER_COLUMNS).eq("id", user_id).limit(1).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("admin.repository.get_user failed id=%s", user_id)
        return None


def count_table_rows(table_name: str) -> int:
    """
    Compte les lignes d'une table via Supabase.
    Utilise count='exact' si disponible, sinon fallback sur len(data).
    """
    try:
        res = get_service_supabase().table(table_name).select("id", count="exact").execute()
        if getattr(res, "count", None) is not None:
            return int(res.count)  # type: ignore
        return len(res.data or [])
    except Exception:
        logger.exception("admin.repository.count_table_rows failed table=%s", table_name)
        return 0


def update_user_role(user_id: str, role: str) -> Optional[dict]:
    try:
        res = (
            get_service_supabase()
            .table("users")
            .update({"role": role})
            .eq("id", user_id)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("admin.repository.update_user_role failed id=%s role=%s", user_id, role)
        return None


# Mise à jour du rôle côté Supabase Auth (user_metadata.role) via l'API admin GoTrue
def set_auth_user_role(user_id: str, role: str) -> bool:
    try:
        import httpx
        from backend.config import SUPABASE_URL, SUPABASE_SERVICE_KEY
        url = f"{SUPABASE_URL.rstrip('/')}/auth/v1/admin/users/{user_id}"
        headers = {
            "Authorization": f"Bearer {SUPABASE_SERVICE_KEY}",
            "apikey": SUPABASE_SERVICE_KEY,
            "Content-Type": "application/json",
        }
        resp = httpx.put(url, json={"user_metadata": {"role": role}}, headers=headers, timeout=10)
        if 200 <= resp.status_code < 300:
            return True
        logger.error("set_auth_user_role failed: status=%s body=%s", resp.status_code, resp.text)
        return False
    except Exception:
        logger.exception("admin.repository.set_auth_user_role failed id=%s role=%s", user_id, role)
        return False
