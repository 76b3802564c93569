from typing import Optional, Dict, Any
import logging
from pydantic import BaseModel, EmailStr, Field
from backend.utils.security import determine_role

logger = logging.getLogger(__name__)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: Optional[str] = None
    phone: Optional[str] = None

class AuthResponse:
    """Résultat d'une opération Supabase Auth; `error` porte aussi les messages informatifs
    (ex: confirmation d'email en attente)."""

    def __init__(
        self,
        success: bool,
        user: Optional[Dict[str, Any]] = None,
        session: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        self.success = success
        self.user = user
        self.session = session
        self.error = error

    @property
    def access_token(self) -> Optional[str]:
        return (self.session or {}).get("access_token")

    def as_token_payload(self) -> Dict[str, Any]:
        return {"access_token": self.access_token, "token_type": "bearer", "user": self.user}

def build_user_dict(user) -> Dict[str, Any]:
    """Profil exposé au front: id, email, rôle applicatif, nom et téléphone (user_metadata)."""
    metadata = getattr(user, "user_metadata", None) or {}
    return {
        "id": getattr(user, "id", None),
        "email": getattr(user, "email", None),
        "full_name": metadata.get("full_name"),
        "phone": metadata.get("phone"),
        "role": determine_role(metadata),
        "metadata": metadata,
    }

def build_session_dict(session) -> Dict[str, Any]:
    return {
        "access_token": getattr(session, "access_token", None),
        "refresh_token": getattr(session, "refresh_token", None),
        "expires_in": getattr(session, "expires_in", None),
    }

def make_auth_response(res, fallback_error: str = "Identifiants invalides") -> AuthResponse:
    sess = getattr(res, "session", None)
    if not sess or not getattr(sess, "access_token", None):
        return AuthResponse(False, error=fallback_error)
    return AuthResponse(True, user=build_user_dict(getattr(res, "user", None)), session=build_session_dict(sess))

def handle_exception(action: str, e: Exception) -> AuthResponse:
    # Le détail Supabase reste dans les logs, jamais dans la réponse
    logger.exception("auth.%s failed", action)
    return AuthResponse(False, error=f"Erreur {action}")
