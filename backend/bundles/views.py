# module backend.bundles.views
"""Catalogue public des bundles.
- GET /api/v1/bundles: liste filtrée (featured, store), triée et paginée.
- GET /api/v1/bundles/{id}: détail.
Visibilité: clients et visiteurs ne voient que les bundles actifs et montrés au client;
admin/staff (session optionnelle) voient tout.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query

from backend.bundles import service as bundles_service
from backend.utils.security import get_optional_user

router = APIRouter(prefix="/api/v1/bundles", tags=["Bundles API"])


@router.get("")
def api_list_bundles(
    featured: bool = False,
    store: Optional[str] = None,
    sort: str = "newest",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
):
    return bundles_service.list_bundles(user, featured=featured, store_id=store, sort=sort, page=page, limit=limit)


@router.get("/{bundle_id}")
def api_get_bundle(bundle_id: str, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    return bundles_service.get_bundle(bundle_id, user)
