# module backend.app
"""Instance FastAPI globale construite par la factory (importée par backend.asgi et les tests)."""
from backend.app_setup.factory import create_app

app = create_app()
