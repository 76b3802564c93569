from typing import Optional, Dict, Any
import logging
from backend.infra.supabase_client import get_supabase, get_service_supabase

logger = logging.getLogger(__name__)

# --- Auth (supabase.auth.*) ---

def auth_sign_in_password(email: str, password: str):
    """Wrapper Supabase Auth: connexion par email/mot de passe (GoTrue)."""
    return get_supabase().auth.sign_in_with_password({"email": email, "password": password})

def auth_sign_up_account(email: str, password: str, options_data: Optional[Dict[str, Any]] = None):
    """Wrapper Supabase Auth: inscription d’un compte client (metadata dans options.data)."""
    credentials: Dict[str, Any] = {"email": email, "password": password}
    if options_data:
        credentials["options"] = {"data": options_data}
    return get_supabase().auth.sign_up(credentials)

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l’utilisateur depuis supabase.auth.get_user(access_token)."""
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user or {}

# --- Table users (profil applicatif) ---

def upsert_user_profile(user_id: str, email: str, role: Optional[str] = None, name: Optional[str] = None) -> bool:
    """Crée ou met à jour le profil applicatif (table users) via la clé de service."""
    if not user_id:
        return False
    payload: Dict[str, Any] = {"id": user_id, "email": email}
    if role:
        payload["role"] = role
    if name:
        payload["name"] = name
    try:
        get_service_supabase().table("users").upsert(payload).execute()
        return True
    except Exception:
        logger.exception("auth.repository.upsert_user_profile failed id=%s", user_id)
        return False
