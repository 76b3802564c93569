"""
Accès à la ligne unique 'app_settings' (identifiée par APP_SETTINGS_ID).
"""
from typing import Any, Dict, Optional
import logging

import backend.infra.supabase_client as supabase_client
from backend.config import APP_SETTINGS_ID
from backend.errors import StorageError

logger = logging.getLogger(__name__)


def find_app_settings() -> Optional[dict]:
    """Retourne la ligne de réglages ou None si absente; StorageError si Supabase échoue."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("app_settings")
            .select("*")
            .eq("id", APP_SETTINGS_ID)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception as e:
        logger.exception("app_settings.repository.find_app_settings failed")
        raise StorageError(str(e)) from e


def upsert_app_settings(data: Dict[str, Any]) -> Optional[dict]:
    payload = {"id": APP_SETTINGS_ID, **data}
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("app_settings")
            .upsert(payload, on_conflict="id")
            .execute()
        )
        rows = getattr(res, "data", None) or []
        return rows[0] if isinstance(rows, list) and rows else None
    except Exception as e:
        logger.exception("app_settings.repository.upsert_app_settings failed data=%s", data)
        raise StorageError(str(e)) from e
