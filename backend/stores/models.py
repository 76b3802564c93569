# module backend.stores.models
from typing import Optional
from pydantic import BaseModel, Field


class StoreCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    whatsapp_number: Optional[str] = None
    is_active: bool = True


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    whatsapp_number: Optional[str] = None
    is_active: Optional[bool] = None
