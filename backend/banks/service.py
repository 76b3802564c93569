"""Couche service de la feature Banks (administration).
Rôles:
- CRUD admin des comptes bancaires (code unique).
- Suppression « douce »: une banque référencée par des commandes est désactivée, pas supprimée.
- Bascule du mode banque unique et choix de la banque par défaut.
"""
from typing import Any, Dict, Optional
import logging

from backend.app_settings import repository as settings_repository
from backend.banks import repository
from backend.banks.resolver import single_bank_mode_of
from backend.errors import ConflictError, NoBankAvailable, NotFoundError, PersistenceFailed, ValidationError

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"name", "code", "created_at", "updated_at"}


def list_banks(search: Optional[str] = None, status: str = "all", sort_by: str = "created_at",
               sort_order: str = "desc", page: int = 1, limit: int = 10) -> Dict[str, Any]:
    if status not in ("all", "active", "inactive"):
        raise ValidationError("Filtre de statut invalide", field="status")
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError("Tri invalide", field="sort_by")
    page = max(1, page)
    limit = min(max(1, limit), 100)
    rows, total = repository.list_banks(
        search=search, status=status, sort_by=sort_by,
        sort_order="asc" if sort_order == "asc" else "desc", page=page, limit=limit,
    )
    total_pages = (total + limit - 1) // limit
    return {
        "banks": rows,
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalCount": total,
            "hasNextPage": page < total_pages,
            "hasPreviousPage": page > 1,
        },
    }


def get_bank(bank_id: str) -> dict:
    bank = repository.get_bank(bank_id)
    if not bank:
        raise NotFoundError("Banque introuvable", bank_id=bank_id)
    return bank


def create_bank(data: Dict[str, Any]) -> dict:
    if repository.get_bank_by_code(data["code"]):
        raise ConflictError("Une banque avec ce code existe déjà", code_value=data["code"])
    created = repository.insert_bank(data)
    if not created:
        raise PersistenceFailed("Impossible de créer la banque")
    logger.info("Banque créée id=%s code=%s", created.get("id"), created.get("code"))
    return created


def _ensure_not_default_in_single_mode(bank_id: str) -> None:
    settings = settings_repository.find_app_settings()
    if single_bank_mode_of(settings) and str((settings or {}).get("default_bank_id")) == str(bank_id):
        raise ConflictError("Banque par défaut du mode banque unique: choisissez une autre banque d'abord")


def update_bank(bank_id: str, data: Dict[str, Any]) -> dict:
    get_bank(bank_id)
    changes = {k: v for k, v in data.items() if v is not None or k == "logo"}
    code = changes.get("code")
    if code:
        other = repository.get_bank_by_code(code)
        if other and str(other.get("id")) != str(bank_id):
            raise ConflictError("Une banque avec ce code existe déjà", code_value=code)
    if changes.get("is_active") is False:
        _ensure_not_default_in_single_mode(bank_id)
    if not changes:
        raise ValidationError("Aucune donnée à mettre à jour")
    updated = repository.update_bank(bank_id, changes)
    if not updated:
        raise PersistenceFailed("Impossible de mettre à jour la banque")
    return updated


def delete_bank(bank_id: str) -> Dict[str, Any]:
    """
    Supprime une banque, ou la désactive si des commandes la référencent.
    Retourne {"deleted": bool, "deactivated": bool}.
    """
    bank = get_bank(bank_id)
    _ensure_not_default_in_single_mode(bank_id)
    if repository.count_orders_for_bank(bank_id) > 0:
        if bank.get("is_active") and not repository.update_bank(bank_id, {"is_active": False}):
            raise PersistenceFailed("Impossible de désactiver la banque")
        logger.info("Banque %s référencée par des commandes: désactivée", bank_id)
        return {"deleted": False, "deactivated": True}
    if not repository.delete_bank(bank_id):
        raise PersistenceFailed("Impossible de supprimer la banque")
    return {"deleted": True, "deactivated": False}


def toggle_single_bank_mode(enabled: bool, default_bank_id: Optional[str] = None) -> dict:
    """
    Active/désactive le mode banque unique.
    - En activation sans banque par défaut: prend la plus ancienne banque active.
    - NoBankAvailable si aucune banque active n'existe.
    - Crée la ligne app_settings si elle est absente.
    """
    settings = settings_repository.find_app_settings() or {}
    data: Dict[str, Any] = {"single_bank_mode": enabled}

    if default_bank_id:
        bank = repository.get_bank(default_bank_id)
        if not bank or not bank.get("is_active"):
            raise ValidationError("Banque introuvable ou inactive", field="default_bank_id")
        data["default_bank_id"] = default_bank_id
    elif enabled:
        current = settings.get("default_bank_id")
        current_bank = repository.get_bank(current) if current else None
        if not current_bank or not current_bank.get("is_active"):
            active = repository.find_active_banks()
            if not active:
                raise NoBankAvailable("Aucune banque active: impossible d'activer le mode banque unique")
            data["default_bank_id"] = active[0]["id"]

    saved = settings_repository.upsert_app_settings(data)
    logger.info("Mode banque unique=%s (default_bank_id=%s)", enabled, data.get("default_bank_id"))
    return saved or {**settings, **data}


def set_default_bank(bank_id: str) -> dict:
    bank = repository.get_bank(bank_id)
    if not bank or not bank.get("is_active"):
        raise ValidationError("Banque introuvable ou inactive", field="bank_id")
    saved = settings_repository.upsert_app_settings({"default_bank_id": bank_id})
    return saved or {"default_bank_id": bank_id}


def get_configuration() -> Dict[str, Any]:
    """Réglages banque unique + banque par défaut résolue + toutes les banques actives."""
    settings = settings_repository.find_app_settings()
    default_id = (settings or {}).get("default_bank_id")
    return {
        "singleBankMode": single_bank_mode_of(settings),
        "defaultBank": repository.get_bank(default_id) if default_id else None,
        "allBanks": repository.find_active_banks(),
    }
