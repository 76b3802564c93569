from typing import List, Optional, Dict, Any
from backend.infra.supabase_client import get_supabase, get_service_supabase
import logging

logger = logging.getLogger(__name__)

STORE_COLUMNS = "id, name, description, image, whatsapp_number, is_active, created_at, updated_at"

def list_stores(include_inactive: bool = False) -> List[dict]:
    try:
        query = get_supabase().table("stores").select(STORE_COLUMNS)
        if not include_inactive:
            query = query.eq("is_active", True)
        res = query.order("name", desc=False).execute()
        return res.data or []
    except Exception:
        logger.exception("stores.repository.list_stores failed")
        return []

def get_store(store_id: str) -> Optional[dict]:
    if not store_id:
        return None
    try:
        res = (
            get_supabase()
            .table("stores")
            .select(STORE_COLUMNS)
            .eq("id", store_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("stores.repository.get_store failed id=%s", store_id)
        return None

def create_store(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("stores").insert(data).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("stores.repository.create_store failed data=%s", data)
        return None

def update_store(store_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            get_service_supabase()
            .table("stores")
            .update(data)
            .eq("id", store_id)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("stores.repository.update_store failed id=%s data=%s", store_id, data)
        return None

def delete_store(store_id: str) -> bool:
    try:
        get_service_supabase().table("stores").delete().eq("id", store_id).execute()
        return True
    except Exception:
        logger.exception("stores.repository.delete_store failed id=%s", store_id)
        return False

def count_bundles_for_store(store_id: str) -> int:
    try:
        res = (
            get_service_supabase()
            .table("product_bundles")
            .select("id", count="exact")
            .eq("store_id", store_id)
            .execute()
        )
        if getattr(res, "count", None) is not None:
            return int(res.count)
        return len(res.data or [])
    except Exception:
        logger.exception("stores.repository.count_bundles_for_store failed id=%s", store_id)
        return 0
