"""
Accès aux données pour la feature 'banks' (table 'banks').

Les lectures utilisées au checkout (find_active_banks, get_bank) lèvent
StorageError au lieu de renvoyer une liste vide: une panne Supabase ne doit pas
se confondre avec « aucune banque active ».
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

import backend.infra.supabase_client as supabase_client
from backend.errors import StorageError

logger = logging.getLogger(__name__)

BANK_COLUMNS = "id, name, code, account_number, account_name, logo, is_active, created_at, updated_at"


def find_active_banks() -> List[dict]:
    """Banques actives, de la plus ancienne à la plus récente (created_at asc)."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("banks")
            .select(BANK_COLUMNS)
            .eq("is_active", True)
            .order("created_at", desc=False)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("banks.repository.find_active_banks failed")
        raise StorageError(str(e)) from e


def get_bank(bank_id: str) -> Optional[dict]:
    if not bank_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("banks")
            .select(BANK_COLUMNS)
            .eq("id", bank_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception as e:
        logger.exception("banks.repository.get_bank failed id=%s", bank_id)
        raise StorageError(str(e)) from e


def get_bank_by_code(code: str) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("banks")
            .select(BANK_COLUMNS)
            .eq("code", code)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception as e:
        logger.exception("banks.repository.get_bank_by_code failed code=%s", code)
        raise StorageError(str(e)) from e


def list_banks(
    *,
    search: Optional[str] = None,
    status: str = "all",
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[dict], int]:
    """Liste admin paginée; retourne (banques, total)."""
    start = (page - 1) * limit
    query = (
        supabase_client.get_service_supabase()
        .table("banks")
        .select(BANK_COLUMNS, count="exact")
    )
    if status == "active":
        query = query.eq("is_active", True)
    elif status == "inactive":
        query = query.eq("is_active", False)
    if search:
        term = search.replace(",", " ").strip()
        query = query.or_(
            f"name.ilike.%{term}%,code.ilike.%{term}%,account_name.ilike.%{term}%,account_number.ilike.%{term}%"
        )
    try:
        res = (
            query
            .order(sort_by, desc=(sort_order == "desc"))
            .range(start, start + limit - 1)
            .execute()
        )
    except Exception as e:
        logger.exception("banks.repository.list_banks failed")
        raise StorageError(str(e)) from e
    rows = res.data or []
    total = getattr(res, "count", None)
    return rows, int(total) if total is not None else len(rows)


def insert_bank(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = supabase_client.get_service_supabase().table("banks").insert(data).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("banks.repository.insert_bank failed data=%s", data)
        return None


def update_bank(bank_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("banks")
            .update(data)
            .eq("id", bank_id)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("banks.repository.update_bank failed id=%s data=%s", bank_id, data)
        return None


def delete_bank(bank_id: str) -> bool:
    try:
        supabase_client.get_service_supabase().table("banks").delete().eq("id", bank_id).execute()
        return True
    except Exception:
        logger.exception("banks.repository.delete_bank failed id=%s", bank_id)
        return False


def count_orders_for_bank(bank_id: str) -> int:
    """Nombre de commandes référençant la banque (historique à préserver)."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("id", count="exact")
            .eq("bank_id", bank_id)
            .execute()
        )
        if getattr(res, "count", None) is not None:
            return int(res.count)
        return len(res.data or [])
    except Exception as e:
        logger.exception("banks.repository.count_orders_for_bank failed id=%s", bank_id)
        raise StorageError(str(e)) from e
