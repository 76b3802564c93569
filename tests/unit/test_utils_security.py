import types
import sys
from fastapi import FastAPI, Depends
from fastapi.responses import Response
from fastapi.testclient import TestClient
import pytest

from backend.utils import security as security_mod
from backend.utils.security import (
    determine_role,
    set_session_cookie,
    clear_session_cookie,
    get_current_user,
    get_optional_user,
    require_admin,
    require_staff,
    COOKIE_NAME,
)

def _make_app():
    app = FastAPI()

    @app.get("/me")
    def me(user=Depends(get_current_user)):
        return user

    @app.get("/maybe")
    def maybe(user=Depends(get_optional_user)):
        return {"user": user}

    @app.get("/staff")
    def staff(user=Depends(require_staff)):
        return {"ok": True}

    @app.get("/admin")
    def admin(user=Depends(require_admin)):
        return {"ok": True}

    return app

def _fake_auth(monkeypatch, user=None, exc=None):
    def _get(token):
        if exc:
            raise exc
        return user
    monkeypatch.setitem(sys.modules, "backend.auth.service", types.SimpleNamespace(get_user_from_token=_get))

@pytest.mark.parametrize("metadata, expected", [
    ({"role": "admin"}, "admin"),
    ({"role": " STAFF "}, "staff"),
    ({"role": "customer"}, "customer"),
    ({"role": "superuser"}, "customer"),
    ({}, "customer"),
    (None, "customer"),
])
def test_determine_role(metadata, expected):
    assert determine_role(metadata) == expected

def test_set_and_clear_session_cookie(monkeypatch):
    # Forcer un header Set-Cookie avec Secure pour un test déterministe
    monkeypatch.setattr(security_mod, "COOKIE_SECURE", True, raising=False)
    resp = Response()

    set_session_cookie(resp, "abc123")
    low = (resp.headers.get("set-cookie") or "").lower()
    assert "sb_access=abc123" in low
    assert "httponly" in low
    assert "path=/" in low
    assert "samesite=lax" in low
    assert "max-age=" in low
    assert "secure" in low

    resp2 = Response()
    clear_session_cookie(resp2)
    h2 = (resp2.headers.get("set-cookie") or "").lower()
    assert "sb_access=" in h2
    assert "max-age=0" in h2

def test_get_current_user_bearer_success(monkeypatch):
    _fake_auth(monkeypatch, {"id": "u1", "email": "a@b", "role": "customer"})
    client = TestClient(_make_app())

    r = client.get("/me", headers={"Authorization": "Bearer tok-123"})
    assert r.status_code == 200
    assert r.json() == {"id": "u1", "email": "a@b", "role": "customer"}

def test_get_current_user_cookie_success(monkeypatch):
    _fake_auth(monkeypatch, {"id": "u1", "role": "admin"})
    client = TestClient(_make_app())
    client.cookies.set(COOKIE_NAME, "cookie-token")

    r = client.get("/me")
    assert r.status_code == 200
    assert r.json()["role"] == "admin"

def test_get_current_user_missing_token_401(monkeypatch):
    _fake_auth(monkeypatch, {"id": "u1"})
    client = TestClient(_make_app())

    r = client.get("/me")
    assert r.status_code == 401
    assert "Non authentifié" in r.text

def test_get_current_user_invalid_token_401(monkeypatch):
    _fake_auth(monkeypatch, exc=RuntimeError("jwt expired"))
    client = TestClient(_make_app())

    r = client.get("/me", headers={"Authorization": "Bearer tok"})
    assert r.status_code == 401
    assert "Session expirée" in r.text

def test_optional_user_anonymous_and_invalid(monkeypatch):
    _fake_auth(monkeypatch, exc=RuntimeError("jwt expired"))
    client = TestClient(_make_app())

    assert client.get("/maybe").json() == {"user": None}
    # Un jeton invalide ne bloque pas la navigation publique
    assert client.get("/maybe", headers={"Authorization": "Bearer tok"}).json() == {"user": None}

def test_optional_user_with_session(monkeypatch):
    _fake_auth(monkeypatch, {"id": "u1", "role": "customer"})
    client = TestClient(_make_app())

    r = client.get("/maybe", headers={"Authorization": "Bearer tok"})
    assert r.json()["user"]["id"] == "u1"

@pytest.mark.parametrize("role, staff_code, admin_code", [
    ("customer", 403, 403),
    ("staff", 200, 403),
    ("admin", 200, 200),
])
def test_role_guards(monkeypatch, role, staff_code, admin_code):
    _fake_auth(monkeypatch, {"id": "u1", "role": role})
    client = TestClient(_make_app())
    headers = {"Authorization": "Bearer tok"}

    assert client.get("/staff", headers=headers).status_code == staff_code
    assert client.get("/admin", headers=headers).status_code == admin_code
