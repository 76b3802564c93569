"""
Accès aux données des bundles (table 'product_bundles', jointure 'stores').
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

import backend.infra.supabase_client as supabase_client
from backend.errors import StorageError

logger = logging.getLogger(__name__)

BUNDLE_COLUMNS = (
    "id, store_id, name, description, image, price, contents, is_active, "
    "show_to_customer, is_featured, created_at, updated_at, stores(id, name)"
)
ADMIN_BUNDLE_COLUMNS = BUNDLE_COLUMNS + ", cost_price"

SORTS = {
    "newest": ("created_at", True),
    "price-low": ("price", False),
    "price-high": ("price", True),
    "name": ("name", False),
}


def list_bundles(
    *,
    customer_only: bool,
    featured: bool = False,
    store_id: Optional[str] = None,
    sort: str = "newest",
    page: int = 1,
    limit: int = 12,
    include_inactive: bool = False,
) -> Tuple[List[dict], int]:
    """
    Liste paginée; retourne (bundles, total).
    - customer_only: ne garde que is_active ET show_to_customer.
    - include_inactive: vue admin complète (ignorée si customer_only).
    """
    columns = BUNDLE_COLUMNS if customer_only else ADMIN_BUNDLE_COLUMNS
    query = supabase_client.get_supabase().table("product_bundles").select(columns, count="exact")
    if customer_only or not include_inactive:
        query = query.eq("is_active", True)
    if customer_only:
        query = query.eq("show_to_customer", True)
    if featured:
        query = query.eq("is_featured", True)
    if store_id:
        query = query.eq("store_id", store_id)
    column, desc = SORTS.get(sort, SORTS["newest"])
    start = (page - 1) * limit
    try:
        res = query.order(column, desc=desc).range(start, start + limit - 1).execute()
    except Exception as e:
        logger.exception("bundles.repository.list_bundles failed")
        raise StorageError(str(e)) from e
    rows = res.data or []
    total = getattr(res, "count", None)
    return rows, int(total) if total is not None else len(rows)


def get_bundle(bundle_id: str) -> Optional[dict]:
    if not bundle_id:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("product_bundles")
            .select(ADMIN_BUNDLE_COLUMNS)
            .eq("id", bundle_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception as e:
        logger.exception("bundles.repository.get_bundle failed id=%s", bundle_id)
        raise StorageError(str(e)) from e


def fetch_bundles_by_ids(ids: List[str]) -> List[dict]:
    """Bundles par IDs (prix et toko de référence pour la tarification d'une commande)."""
    if not ids:
        return []
    try:
        res = (
            supabase_client.get_supabase()
            .table("product_bundles")
            .select("id, store_id, name, price, is_active, show_to_customer")
            .in_("id", [str(i) for i in ids])
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("bundles.repository.fetch_bundles_by_ids failed ids=%s", ids)
        raise StorageError(str(e)) from e


def get_bundles_map(ids: List[str]) -> Dict[str, Dict[str, Any]]:
    """Retourne un dict {id: bundle} à partir d'une liste d'IDs."""
    return {str(b.get("id")): b for b in fetch_bundles_by_ids(list(ids))}


def create_bundle(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = supabase_client.get_service_supabase().table("product_bundles").insert(data).execute()
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("bundles.repository.create_bundle failed data=%s", data)
        return None


def update_bundle(bundle_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("product_bundles")
            .update(data)
            .eq("id", bundle_id)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception:
        logger.exception("bundles.repository.update_bundle failed id=%s data=%s", bundle_id, data)
        return None


def delete_bundle(bundle_id: str) -> bool:
    try:
        supabase_client.get_service_supabase().table("product_bundles").delete().eq("id", bundle_id).execute()
        return True
    except Exception:
        logger.exception("bundles.repository.delete_bundle failed id=%s", bundle_id)
        return False
