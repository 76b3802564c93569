# module backend.app_settings.views
from fastapi import APIRouter

from backend.app_settings import service as settings_service

router = APIRouter(prefix="/api/v1/settings", tags=["Settings API"])


@router.get("")
def api_public_settings():
    """Réglages publics: nom de l'application, événement, lieu de retrait, maintenance."""
    return settings_service.public_settings()
