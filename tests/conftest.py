import os

# Désactive l'init fastapi-limiter (évite toute connexion Redis pendant les tests)
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("SERVICE_FEE_PER_STORE", "25000")

import pytest
from typing import Generator, Dict, Any
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from backend.app import app as fastapi_app
from backend.utils.security import get_optional_user, require_admin, require_staff, require_user

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

CUSTOMER: Dict[str, Any] = {
    "id": "test-user",
    "email": "test@example.com",
    "role": "customer",
    "metadata": {"full_name": "Test User"},
    "token": "fake-token",
}
ADMIN: Dict[str, Any] = {"id": "admin-user-id", "email": "admin@example.com", "role": "admin", "metadata": {}}
STAFF: Dict[str, Any] = {"id": "staff-user-id", "email": "staff@example.com", "role": "staff", "metadata": {}}

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def customer() -> Dict[str, Any]:
    return dict(CUSTOMER)

# Simuler un client connecté pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    app.dependency_overrides[require_user] = lambda: dict(CUSTOMER)
    try:
        yield
    finally:
        app.dependency_overrides.clear()

@pytest.fixture
def authenticated_admin_client(app, client):
    app.dependency_overrides[require_admin] = lambda: dict(ADMIN)
    app.dependency_overrides[require_staff] = lambda: dict(ADMIN)
    app.dependency_overrides[get_optional_user] = lambda: dict(ADMIN)
    yield client

@pytest.fixture
def authenticated_staff_client(app, client):
    app.dependency_overrides[require_staff] = lambda: dict(STAFF)
    app.dependency_overrides[get_optional_user] = lambda: dict(STAFF)
    yield client

# Aucun test ne doit joindre Supabase
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("backend.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("backend.infra.supabase_client.get_service_supabase", lambda: MagicMock())

@pytest.fixture
def banks():
    """Trois banques actives, triées par created_at croissant."""
    return [
        {"id": "b1", "name": "BCA", "code": "BCA", "is_active": True, "created_at": "2025-01-01T00:00:00Z"},
        {"id": "b2", "name": "Mandiri", "code": "MANDIRI", "is_active": True, "created_at": "2025-01-02T00:00:00Z"},
        {"id": "b3", "name": "BNI", "code": "BNI", "is_active": True, "created_at": "2025-01-03T00:00:00Z"},
    ]

@pytest.fixture
def bundles_by_id():
    """Deux toko: s1 (2 bundles) et s2 (1 bundle)."""
    return {
        "k1": {"id": "k1", "store_id": "s1", "name": "Paket Kue", "price": 42000, "is_active": True, "show_to_customer": True},
        "k2": {"id": "k2", "store_id": "s1", "name": "Paket Kopi", "price": 25000, "is_active": True, "show_to_customer": True},
        "k3": {"id": "k3", "store_id": "s2", "name": "Paket Batik", "price": 42000, "is_active": True, "show_to_customer": True},
        "hidden": {"id": "hidden", "store_id": "s2", "name": "Brouillon", "price": 1000, "is_active": True, "show_to_customer": False},
    }
