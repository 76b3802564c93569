"""
Factory d’application utilisée par les entrypoints (backend.app, backend.asgi).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from backend.config import COOKIE_SECURE
from .lifespan import lifespan
from .middlewares import (
    register_basic_middlewares,
    register_security_middleware,
    register_no_cache_middleware,
    register_force_https_middleware,
)
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - middlewares de base, sécurité/CSRF, no-cache
      - gestionnaires d’exceptions et routes simples
      - tous les routers (API, admin, health)
      - redirection HTTPS en dernier (exécutée en premier) quand les cookies sont sécurisés
    """
    app = FastAPI(title="Perdami Store API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    if COOKIE_SECURE:
        register_force_https_middleware(app)
    return app
