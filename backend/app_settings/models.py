# module backend.app_settings.models
from typing import Optional
from pydantic import BaseModel, Field


class AppSettingsUpdate(BaseModel):
    """Réglages d'affichage modifiables par l'admin (le mode banque unique a son propre endpoint)."""
    app_name: Optional[str] = Field(default=None, min_length=1)
    app_description: Optional[str] = Field(default=None, min_length=1)
    event_name: Optional[str] = Field(default=None, min_length=1)
    event_year: Optional[str] = Field(default=None, min_length=4, max_length=4)
    pickup_location: Optional[str] = Field(default=None, min_length=1)
    pickup_city: Optional[str] = Field(default=None, min_length=1)
    is_maintenance_mode: Optional[bool] = None
    maintenance_message: Optional[str] = None
