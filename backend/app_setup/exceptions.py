"""
Gestionnaires d’exceptions enregistrés par la factory.
- PerdamiError: JSON {detail, code[, details]} avec le statut porté par l’erreur.
- StorageError non convertie par un service: 503.
- HTTPException: JSON {detail} avec les en-têtes de l’exception (WWW-Authenticate...).
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from backend.errors import PerdamiError, StorageError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PerdamiError)
    async def domain_error(request: Request, exc: PerdamiError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s (%s)", request.method, request.url.path, exc.code, exc.__cause__ or exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        logger.error("%s %s -> stockage indisponible", request.method, request.url.path)
        return JSONResponse(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporairement indisponible", "code": "storage_unavailable"},
        )

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        if exc.status_code == 403:
            logger.info("%s %s -> accès refusé", request.method, request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))
