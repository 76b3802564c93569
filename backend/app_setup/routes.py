"""
Routes simples (hors routers).
- /: identité de l’API (nom, événement) pour le front et les sondes.
- /favicon.ico: pas de contenu (204) pour éviter des 404 dans les logs.
"""
from fastapi import FastAPI
from fastapi.responses import Response
from starlette.status import HTTP_204_NO_CONTENT
from backend.config import EVENT_NAME

def register_routes(app: FastAPI) -> None:
    @app.get("/", include_in_schema=False)
    def root():
        return {"name": app.title, "event": EVENT_NAME, "docs": "/docs"}

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
