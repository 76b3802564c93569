"""
Registre central des routers (API v1, admin, health).
- API v1: auth, settings, stores, bundles, banks, orders, pickup, notifications
- Admin: admin_router (/admin/api), journal d'activité, notifications admin
- Health: health_router
"""
from fastapi import FastAPI
from backend.auth.views import api_router as auth_api_router
from backend.app_settings.views import router as settings_router
from backend.stores.views import router as stores_router
from backend.bundles.views import router as bundles_router
from backend.banks.views import router as banks_router
from backend.orders.views import router as orders_router, pickup_router
from backend.notifications.views import router as notifications_router, admin_router as admin_notifications_router
from backend.admin.views import router as admin_router
from backend.audit.views import router as audit_router
from backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(auth_api_router)
    app.include_router(settings_router)
    app.include_router(stores_router)
    app.include_router(bundles_router)
    app.include_router(banks_router)
    app.include_router(orders_router)
    app.include_router(pickup_router)
    app.include_router(notifications_router)
    # Admin
    app.include_router(admin_router)
    app.include_router(admin_notifications_router)
    app.include_router(audit_router)
    # Health & monitoring
    app.include_router(health_router)
