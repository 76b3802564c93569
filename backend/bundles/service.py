"""Couche service des bundles.
Règle de visibilité: un client (ou un visiteur anonyme) ne voit que les bundles
is_active ET show_to_customer; admin et staff voient tout.
"""
from typing import Any, Dict, Optional
import logging

from backend.bundles import repository
from backend.errors import NotFoundError, PersistenceFailed, ValidationError
from backend.stores import repository as stores_repository

logger = logging.getLogger(__name__)

BACK_OFFICE_ROLES = {"admin", "staff"}


def is_back_office(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get("role") in BACK_OFFICE_ROLES


def is_visible_to_customer(bundle: Dict[str, Any]) -> bool:
    return bool(bundle.get("is_active")) and bool(bundle.get("show_to_customer"))


def list_bundles(user: Optional[Dict[str, Any]] = None, *, featured: bool = False, store_id: Optional[str] = None,
                 sort: str = "newest", page: int = 1, limit: int = 12) -> Dict[str, Any]:
    if sort not in repository.SORTS:
        raise ValidationError("Tri invalide", field="sort")
    page = max(1, page)
    limit = min(max(1, limit), 100)
    rows, total = repository.list_bundles(
        customer_only=not is_back_office(user),
        featured=featured,
        store_id=store_id,
        sort=sort,
        page=page,
        limit=limit,
        include_inactive=is_back_office(user),
    )
    if not is_back_office(user):
        # cost_price ne sort jamais côté client
        rows = [{k: v for k, v in r.items() if k != "cost_price"} for r in rows]
    return {
        "bundles": rows,
        "pagination": {"page": page, "limit": limit, "total": total, "pages": (total + limit - 1) // limit},
    }


def get_bundle(bundle_id: str, user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    bundle = repository.get_bundle(bundle_id)
    if not bundle:
        raise NotFoundError("Bundle introuvable", bundle_id=bundle_id)
    if is_back_office(user):
        return bundle
    if not is_visible_to_customer(bundle):
        raise NotFoundError("Bundle introuvable", bundle_id=bundle_id)
    return {k: v for k, v in bundle.items() if k != "cost_price"}


def create_bundle(data: Dict[str, Any]) -> Dict[str, Any]:
    if not stores_repository.get_store(data["store_id"]):
        raise ValidationError("Toko introuvable", field="store_id")
    created = repository.create_bundle(data)
    if not created:
        raise PersistenceFailed("Impossible de créer le bundle")
    logger.info("Bundle créé id=%s store_id=%s", created.get("id"), data["store_id"])
    return created


def update_bundle(bundle_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    if not repository.get_bundle(bundle_id):
        raise NotFoundError("Bundle introuvable", bundle_id=bundle_id)
    changes = {k: v for k, v in data.items() if v is not None}
    if not changes:
        raise ValidationError("Aucune donnée à mettre à jour")
    if "store_id" in changes and not stores_repository.get_store(changes["store_id"]):
        raise ValidationError("Toko introuvable", field="store_id")
    updated = repository.update_bundle(bundle_id, changes)
    if not updated:
        raise PersistenceFailed("Impossible de mettre à jour le bundle")
    return updated


def delete_bundle(bundle_id: str) -> None:
    if not repository.get_bundle(bundle_id):
        raise NotFoundError("Bundle introuvable", bundle_id=bundle_id)
    if not repository.delete_bundle(bundle_id):
        raise PersistenceFailed("Impossible de supprimer le bundle")
