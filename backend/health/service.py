from typing import Any, Dict
import logging

import backend.infra.supabase_client as supabase_client
from backend.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY

logger = logging.getLogger(__name__)

def health_supabase_info() -> Dict[str, Any]:
    """
    État de la connexion Supabase:
    - clés configurées (sans jamais exposer leur valeur)
    - lecture test sur la table banks (count exact)
    """
    info: Dict[str, Any] = {
        "url_configured": bool(SUPABASE_URL),
        "anon_key_configured": bool(SUPABASE_ANON),
        "service_key_configured": bool(SUPABASE_SERVICE_KEY),
        "reachable": False,
    }
    try:
        res = supabase_client.get_supabase().table("banks").select("id", count="exact").limit(1).execute()
        info["reachable"] = True
        count = getattr(res, "count", None)
        info["banks_count"] = count if isinstance(count, int) else None
    except Exception as e:
        logger.warning("health.supabase: lecture impossible (%s)", type(e).__name__)
        info["error"] = type(e).__name__
    return info
