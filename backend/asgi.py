"""
Point d'entrée ASGI (`backend.asgi:app`) pour uvicorn/gunicorn en production.
En local: `python -m backend` (voir backend/__main__.py).
"""

from backend.app import app

__all__ = ["app"]
