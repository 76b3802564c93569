# module backend.notifications.models
"""Types de notifications in-app et schémas d'entrée."""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    ORDER_PLACED = "ORDER_PLACED"
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    ORDER_READY = "ORDER_READY"
    ORDER_COMPLETED = "ORDER_COMPLETED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PAYMENT_REFUNDED = "PAYMENT_REFUNDED"
    NEW_ORDER = "NEW_ORDER"
    ANNOUNCEMENT = "ANNOUNCEMENT"


class MarkReadRequest(BaseModel):
    notification_id: Optional[str] = None
    mark_all_read: bool = False


class AnnouncementRequest(BaseModel):
    user_ids: List[str] = Field(min_length=1, max_length=500)
    title: str = Field(min_length=1, max_length=120)
    message: str = Field(min_length=1, max_length=1000)
