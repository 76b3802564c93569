from typing import Optional, Dict, Any
from backend.auth.models import AuthResponse, make_auth_response, handle_exception
from backend.utils.security import determine_role, ROLE_CUSTOMER
from .repository import (
    auth_sign_in_password as sign_in_password,
    auth_sign_up_account as sign_up_account,
    get_user_from_access_token as _repo_get_user_from_token,
    upsert_user_profile as _repo_upsert_user_profile,
)

# --- Cas d’usage Auth exposés ---

def login(email: str, password: str) -> AuthResponse:
    """Connexion:
    - Délègue à supabase.auth.sign_in_with_password via repository
    - Normalise la réponse en AuthResponse
    """
    try:
        email = (email or "").strip()
        res = sign_in_password(email, password)
        return make_auth_response(res, fallback_error="Identifiants invalides ou email non confirmé")
    except Exception as e:
        return handle_exception("sign_in", e)

def signup(email: str, password: str, full_name: Optional[str] = None, phone: Optional[str] = None) -> AuthResponse:
    """Inscription d’un client. Le rôle est toujours customer; staff et admin sont attribués
    depuis l’administration."""
    try:
        options_data: Dict[str, Any] = {"role": ROLE_CUSTOMER}
        if full_name:
            options_data["full_name"] = full_name.strip()
        if phone:
            options_data["phone"] = phone.strip()
        res = sign_up_account(email=(email or "").strip(), password=password, options_data=options_data)
        sess = getattr(res, "session", None)
        if sess and getattr(sess, "access_token", None):
            return make_auth_response(res)
        return AuthResponse(True, error="Inscription réussie, vérifiez votre email")
    except Exception as e:
        msg = str(e).lower()
        if any(k in msg for k in ["already", "exists", "23505"]):
            return AuthResponse(False, error="Utilisateur existe déjà")
        return handle_exception("sign_up", e)

# --- Intégration sécurité / profil ---

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise user issu de supabase.auth.get_user(access_token): {id, email, metadata, role, token}."""
    raw = _repo_get_user_from_token(access_token)
    metadata = raw.get("user_metadata") or {}
    return {
        "id": raw.get("id"),
        "email": raw.get("email"),
        "metadata": metadata,
        "role": determine_role(metadata),
        "token": access_token,
    }

def sync_user_profile(user: Dict[str, Any]) -> bool:
    """Synchronise la table users (email, rôle, nom) après connexion."""
    metadata = user.get("metadata") or {}
    return _repo_upsert_user_profile(user.get("id"), user.get("email"), user.get("role"), metadata.get("full_name"))
