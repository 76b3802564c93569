"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS, TrustedHost et confiance en X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité, CSP, et CSRF double-submit pour les sessions cookie.
- register_no_cache_middleware: empêche la mise en cache des réponses /admin, commandes et notifications.
- register_force_https_middleware: force la redirection HTTPS derrière un proxy.
Notes:
- L’ordre d’ajout compte: le middleware HTTPS est ajouté en dernier pour s’exécuter en premier.
- Les clients Bearer (sans cookie sb_access) ne sont pas soumis au contrôle CSRF.
"""
import secrets
from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from backend.config import SUPABASE_URL, COOKIE_SECURE, CORS_ORIGINS, ALLOWED_HOSTS
from backend.utils.security import COOKIE_NAME

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
NO_CACHE_PREFIXES = ("/admin", "/api/v1/orders", "/api/v1/notifications")
DOCS_CDNS = ["https://cdn.jsdelivr.net", "https://unpkg.com"]

def register_basic_middlewares(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )
    # Fait confiance aux en-têtes X-Forwarded-* (Render, Nginx, etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

def _csrf_ok(request: Request) -> bool:
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME) or ""
    header_token = request.headers.get(CSRF_HEADER_NAME, "")
    return bool(cookie_token and header_token) and secrets.compare_digest(header_token, cookie_token)

def _content_security_policy() -> str:
    connect = ["'self'"]
    if SUPABASE_URL:
        connect.append(SUPABASE_URL.rstrip("/"))
    return (
        "default-src 'self'; "
        "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
        "img-src 'self' data: blob: https://fastapi.tiangolo.com; "
        f"style-src 'self' 'unsafe-inline' {' '.join(DOCS_CDNS)}; "
        f"script-src 'self' 'unsafe-inline' {' '.join(DOCS_CDNS)}; "
        f"connect-src {' '.join(connect)}"
    )

def register_security_middleware(app: FastAPI) -> None:
    """
    - CSRF: sur requête mutative avec cookie de session, X-CSRF-Token doit égaler le cookie csrf_token.
    - En-têtes: X-Frame-Options, X-Content-Type-Options, Referrer-Policy, Permissions-Policy, HSTS (si secure), CSP.
    - Dépose le cookie csrf_token s’il est absent (lisible par le front).
    """
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        is_state_changing = request.method.upper() in ("POST", "PUT", "PATCH", "DELETE")
        if is_state_changing and request.cookies.get(COOKIE_NAME) and not _csrf_ok(request):
            return JSONResponse(status_code=403, content={"detail": "CSRF verification failed"})

        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")
        response.headers["Content-Security-Policy"] = _content_security_policy()

        if not request.cookies.get(CSRF_COOKIE_NAME):
            response.set_cookie(
                key=CSRF_COOKIE_NAME,
                value=secrets.token_urlsafe(32),
                httponly=False,
                secure=COOKIE_SECURE,
                samesite="Lax",
                max_age=60 * 60,
                path="/",
            )
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def no_cache_for_protected(request: Request, call_next):
        response = await call_next(request)
        if request.method == "GET" and request.url.path.startswith(NO_CACHE_PREFIXES):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

def register_force_https_middleware(app: FastAPI) -> None:
    """Redirige HTTP -> HTTPS lorsqu’un proxy place x-forwarded-proto=http."""
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            url = str(request.url.replace(scheme="https"))
            return RedirectResponse(url, status_code=301)
        return await call_next(request)
