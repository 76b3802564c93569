# module backend.stores.views
"""Endpoints publics des toko (boutiques partenaires de l'événement)."""
from fastapi import APIRouter

from backend.errors import NotFoundError
from backend.stores import service as stores_service

router = APIRouter(prefix="/api/v1/stores", tags=["Stores API"])


@router.get("")
def api_list_stores():
    return {"items": stores_service.list_stores()}


@router.get("/{store_id}")
def api_get_store(store_id: str):
    store = stores_service.get_store(store_id)
    if not store.get("is_active"):
        raise NotFoundError("Toko introuvable", store_id=store_id)
    return store
