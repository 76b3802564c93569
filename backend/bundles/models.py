# module backend.bundles.models
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class BundleCreate(BaseModel):
    store_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    price: int = Field(ge=0)
    cost_price: Optional[int] = Field(default=None, ge=0)
    contents: List[Dict[str, Any]] = Field(default_factory=list)
    is_active: bool = True
    show_to_customer: bool = False
    is_featured: bool = False


class BundleUpdate(BaseModel):
    store_id: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    cost_price: Optional[int] = Field(default=None, ge=0)
    contents: Optional[List[Dict[str, Any]]] = None
    is_active: Optional[bool] = None
    show_to_customer: Optional[bool] = None
    is_featured: Optional[bool] = None
