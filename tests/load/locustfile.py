# Scénario de charge: catalogue public, banques, devis, notifications et (optionnellement) création de commandes.
# Identifiants: tests/load/users.csv (email,password), LOCUST_EMAIL/LOCUST_PASSWORD ou LOCUST_BEARER.
# LOCUST_CREATE_ORDERS=1 active la création réelle de commandes (à réserver à un environnement de test).
from locust import HttpUser, task, between
import os
import csv
import random
import threading

_CREDENTIALS: list[tuple[str, str]] = []
_CRED_LOCK = threading.Lock()
_CRED_IDX = 0

def _ensure_credentials_loaded():
    if _CREDENTIALS:
        return
    csv_path = os.path.join(os.path.dirname(__file__), "users.csv")
    if os.path.exists(csv_path):
        with open(csv_path, newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                email = (row.get("email") or "").strip()
                password = (row.get("password") or "").strip()
                if email and password:
                    _CREDENTIALS.append((email, password))
    if not _CREDENTIALS:
        env_email = os.getenv("LOCUST_EMAIL", "").strip()
        env_password = os.getenv("LOCUST_PASSWORD", "").strip()
        if env_email and env_password:
            _CREDENTIALS.append((env_email, env_password))

def _next_credential():
    global _CRED_IDX
    with _CRED_LOCK:
        if not _CREDENTIALS:
            return None
        cred = _CREDENTIALS[_CRED_IDX % len(_CREDENTIALS)]
        _CRED_IDX += 1
        return cred

class ShopperUser(HttpUser):
    wait_time = between(0.5, 2.0)

    def on_start(self):
        # Bearer uniquement: pas de cookie sb_access, donc pas de contrôle CSRF
        self.headers = {"Accept": "application/json"}
        self.bundle_ids: list[str] = []
        bearer = os.getenv("LOCUST_BEARER", "").strip()
        if bearer:
            self.headers["Authorization"] = f"Bearer {bearer}"
            return
        _ensure_credentials_loaded()
        cred = _next_credential()
        if cred:
            self._login(*cred)

    def _login(self, email: str, password: str):
        with self.client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
            name="POST /api/v1/auth/login",
            catch_response=True,
        ) as resp:
            token = resp.json().get("access_token") if resp.status_code == 200 else None
            if not token:
                resp.failure(f"Login failed ({resp.status_code}): {resp.text[:200]}")
                return
            self.headers["Authorization"] = f"Bearer {token}"
            resp.success()
        # le cookie posé par /login déclencherait le contrôle CSRF sur les POST
        self.client.cookies.clear()

    @task(5)
    def browse_bundles(self):
        resp = self.client.get("/api/v1/bundles?sort=newest", name="GET /api/v1/bundles", headers=self.headers)
        if resp.status_code == 200:
            self.bundle_ids = [b["id"] for b in resp.json().get("bundles", []) if b.get("id")]

    @task(2)
    def available_banks(self):
        self.client.get("/api/v1/banks", name="GET /api/v1/banks", headers=self.headers)

    @task(2)
    def notifications(self):
        if "Authorization" not in self.headers:
            return
        self.client.get("/api/v1/notifications?limit=10", name="GET /api/v1/notifications", headers=self.headers)

    def _cart(self):
        picked = random.sample(self.bundle_ids, k=min(3, len(self.bundle_ids)))
        return [{"bundle_id": bid, "quantity": random.randint(1, 3)} for bid in picked]

    @task(3)
    def quote(self):
        if not self.bundle_ids:
            return
        self.client.post("/api/v1/orders/quote", json={"items": self._cart()},
                         name="POST /api/v1/orders/quote", headers=self.headers)

    @task(1)
    def create_order(self):
        if os.getenv("LOCUST_CREATE_ORDERS") != "1" or not self.bundle_ids:
            return
        if "Authorization" not in self.headers:
            return
        with self.client.post(
            "/api/v1/orders",
            json={
                "customer_name": "Load Test",
                "customer_email": "load@example.com",
                "items": self._cart(),
            },
            name="POST /api/v1/orders",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            # 429: limite de débit atteinte, comportement attendu sous charge
            if resp.status_code in (201, 429):
                resp.success()
            else:
                resp.failure(f"Order failed ({resp.status_code}): {resp.text[:200]}")
