"""
Réglages applicatifs (ligne unique app_settings).
- public_settings: ce que le front affiche (nom, événement, lieu de retrait, maintenance).
- update_settings: mise à jour admin (upsert, la ligne est créée si absente).
"""
from typing import Any, Dict
import logging

from backend.app_settings import repository
from backend.banks.resolver import single_bank_mode_of
from backend.config import EVENT_NAME, PICKUP_LOCATION, PICKUP_CITY
from backend.errors import ValidationError

logger = logging.getLogger(__name__)

PUBLIC_DEFAULTS: Dict[str, Any] = {
    "app_name": "Perdami Store",
    "event_name": EVENT_NAME,
    "pickup_location": PICKUP_LOCATION,
    "pickup_city": PICKUP_CITY,
    "is_maintenance_mode": False,
    "maintenance_message": None,
}


def public_settings() -> Dict[str, Any]:
    settings = repository.find_app_settings() or {}
    data = {k: settings.get(k) if settings.get(k) is not None else v for k, v in PUBLIC_DEFAULTS.items()}
    data["single_bank_mode"] = single_bank_mode_of(settings or None)
    return data


def get_settings() -> Dict[str, Any]:
    return repository.find_app_settings() or {}


def update_settings(data: Dict[str, Any]) -> Dict[str, Any]:
    changes = {k: v for k, v in data.items() if v is not None or k == "maintenance_message"}
    if not changes:
        raise ValidationError("Aucune donnée à mettre à jour")
    saved = repository.upsert_app_settings(changes)
    logger.info("Réglages mis à jour: %s", sorted(changes))
    return saved or changes
