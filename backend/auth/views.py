from fastapi import APIRouter, HTTPException, Depends, Response
from typing import Dict, Any

from backend.utils.security import require_user, set_session_cookie, clear_session_cookie
from backend.utils.rate_limit import optional_rate_limit
from .models import LoginRequest, SignupRequest
from .service import (
    login as svc_login,
    signup as svc_signup,
    sync_user_profile,
)

api_router = APIRouter(prefix="/api/v1/auth", tags=["Auth API"])

@api_router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def api_login(req: LoginRequest, response: Response):
    """Connexion (API JSON): pose le cookie de session (sb_access) et retourne
    {access_token, token_type, user}."""
    result = svc_login(req.email, req.password)
    if not result.success:
        raise HTTPException(status_code=401, detail=result.error or "Identifiants invalides")
    sync_user_profile(result.user or {})
    set_session_cookie(response, result.access_token)
    return result.as_token_payload()

@api_router.post("/signup", dependencies=[Depends(optional_rate_limit(times=3, seconds=60))])
def api_signup(req: SignupRequest, response: Response):
    result = svc_signup(req.email, req.password, req.full_name, req.phone)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Erreur inscription")
    if result.access_token:
        sync_user_profile(result.user or {})
        set_session_cookie(response, result.access_token)
        return result.as_token_payload()
    return {"message": result.error or "Inscription réussie, vérifiez votre email"}

@api_router.get("/me")
def api_me(user: Dict[str, Any] = Depends(require_user)):
    return {"id": user["id"], "email": user["email"], "role": user["role"], "metadata": user["metadata"]}

@api_router.post("/logout")
def api_logout(response: Response):
    """Supprime le cookie de session (sb_access)."""
    clear_session_cookie(response)
    return {"message": "Déconnexion réussie"}
