from backend.auth.models import AuthResponse


def test_api_login_success(client, monkeypatch):
    synced = []
    def _fake_login(email, pwd):
        return AuthResponse(True, user={"id": "u1", "email": email, "role": "customer", "metadata": {}},
                            session={"access_token": "AT"})
    monkeypatch.setattr("backend.auth.views.svc_login", _fake_login)
    monkeypatch.setattr("backend.auth.views.sync_user_profile", lambda user: synced.append(user["id"]) or True)

    res = client.post("/api/v1/auth/login", json={"email": "u@test.com", "password": "x"})
    assert res.status_code == 200
    data = res.json()
    assert data["access_token"] == "AT"
    assert data["user"]["id"] == "u1"
    assert res.cookies.get("sb_access") == "AT"
    assert synced == ["u1"]


def test_api_login_invalid(client, monkeypatch):
    monkeypatch.setattr("backend.auth.views.svc_login", lambda email, pwd: AuthResponse(False, error="bad creds"))
    res = client.post("/api/v1/auth/login", json={"email": "u@test.com", "password": "bad"})
    assert res.status_code == 401
    assert res.json()["detail"] == "bad creds"


def test_api_me_returns_user_info(client):
    res = client.get("/api/v1/auth/me")
    assert res.status_code == 200
    data = res.json()
    assert data["email"] == "test@example.com"
    assert data["role"] == "customer"


def test_api_signup_without_session_returns_message(client, monkeypatch):
    monkeypatch.setattr("backend.auth.views.svc_signup",
                        lambda email, pwd, name, phone: AuthResponse(True, error="Inscription réussie, vérifiez votre email"))
    res = client.post("/api/v1/auth/signup", json={"email": "new@test.com", "password": "secret123", "full_name": "New"})
    assert res.status_code == 200
    assert "vérifiez" in res.json()["message"]


def test_api_signup_short_password(client):
    res = client.post("/api/v1/auth/signup", json={"email": "new@test.com", "password": "short"})
    assert res.status_code == 422


def test_api_logout_clears_cookie(client):
    res = client.post("/api/v1/auth/logout")
    assert res.status_code == 200
    assert "sb_access=" in res.headers.get("set-cookie", "")
