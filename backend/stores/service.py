# module backend.stores.service
from typing import Any, Dict, List
import logging

from backend.errors import ConflictError, NotFoundError, PersistenceFailed, ValidationError
from backend.stores import repository

logger = logging.getLogger(__name__)


def list_stores(include_inactive: bool = False) -> List[dict]:
    return repository.list_stores(include_inactive=include_inactive)


def get_store(store_id: str) -> dict:
    store = repository.get_store(store_id)
    if not store:
        raise NotFoundError("Toko introuvable", store_id=store_id)
    return store


def create_store(data: Dict[str, Any]) -> dict:
    created = repository.create_store(data)
    if not created:
        raise PersistenceFailed("Impossible de créer le toko")
    logger.info("Toko créé id=%s name=%s", created.get("id"), created.get("name"))
    return created


def update_store(store_id: str, data: Dict[str, Any]) -> dict:
    get_store(store_id)
    changes = {k: v for k, v in data.items() if v is not None}
    if not changes:
        raise ValidationError("Aucune donnée à mettre à jour")
    updated = repository.update_store(store_id, changes)
    if not updated:
        raise PersistenceFailed("Impossible de mettre à jour le toko")
    return updated


def delete_store(store_id: str) -> None:
    """Refusé tant que des bundles sont rattachés au toko (désactiver plutôt)."""
    get_store(store_id)
    if repository.count_bundles_for_store(store_id) > 0:
        raise ConflictError("Des bundles sont rattachés à ce toko", store_id=store_id)
    if not repository.delete_store(store_id):
        raise PersistenceFailed("Impossible de supprimer le toko")
