# module backend.admin.service

from typing import Optional, Dict, Any
from backend.admin import repository as admin_repository
from backend.errors import NotFoundError, PersistenceFailed, ValidationError
from backend.orders import repository as orders_repository
from backend.utils.security import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_STAFF
import logging

logger = logging.getLogger(__name__)

ROLES = (ROLE_CUSTOMER, ROLE_STAFF, ROLE_ADMIN)

def get_stats() -> Dict[str, Any]:
    """Tableau de bord: volumes par table et synthèse des commandes."""
    stats: Dict[str, Any] = {
        "users": admin_repository.count_table_rows("users"),
        "stores": admin_repository.count_table_rows("stores"),
        "bundles": admin_repository.count_table_rows("product_bundles"),
        "banks": admin_repository.count_table_rows("banks"),
    }
    stats["orders"] = orders_repository.order_stats()
    return stats

def list_users(search: Optional[str] = None, role: Optional[str] = None, page: int = 1, limit: int = 20) -> Dict[str, Any]:
    if role and role not in ROLES:
        raise ValidationError("Rôle inconnu", field="role")
    rows, total = admin_repository.list_users(search=search, role=role, page=page, limit=limit)
    return {"users": rows, "total": total, "page": page, "limit": limit}

def update_user_role(user_id: str, role: str, acting_admin: Dict[str, Any]) -> dict:
    """
    Change le rôle (Supabase Auth puis table users). Un admin ne peut pas se rétrograder lui-même.
    Si la table users refuse l'écriture, le rôle Auth est remis à sa valeur précédente.
    """
    role = (role or "").strip().lower()
    if role not in ROLES:
        raise ValidationError("Rôle inconnu", field="role")
    current = admin_repository.get_user(user_id)
    if not current:
        raise NotFoundError("Utilisateur introuvable", user_id=user_id)
    if str(acting_admin.get("id")) == str(user_id) and role != ROLE_ADMIN:
        raise ValidationError("Impossible de retirer son propre rôle admin")
    previous_role = current.get("role") or ROLE_CUSTOMER
    if not admin_repository.set_auth_user_role(user_id, role):
        raise PersistenceFailed("Impossible de mettre à jour le rôle")
    updated = admin_repository.update_user_role(user_id, role)
    if not updated:
        if not admin_repository.set_auth_user_role(user_id, previous_role):
            logger.error("Rôle Auth non restauré user_id=%s role=%s attendu=%s", user_id, role, previous_role)
        raise PersistenceFailed("Impossible de mettre à jour le rôle")
    logger.info("Rôle modifié user_id=%s role=%s by=%s", user_id, role, acting_admin.get("id"))
    return updated
