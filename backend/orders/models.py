# module backend.orders.models
"""Statuts et schémas de requête des commandes."""
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


PAYMENT_METHOD_BANK_TRANSFER = "BANK_TRANSFER"

# Graphe des statuts de commande; COMPLETED et CANCELLED sont terminaux
ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class CartItem(BaseModel):
    bundle_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)


class QuoteRequest(BaseModel):
    items: List[CartItem] = Field(min_length=1)


class CreateOrderRequest(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    bank_id: Optional[str] = None
    pickup_date: Optional[str] = None
    notes: Optional[str] = None
    items: List[CartItem] = Field(min_length=1)

    @field_validator("customer_name")
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nom requis")
        return v

    @field_validator("pickup_date")
    def check_pickup_date(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        # YYYY-MM-DD
        return date.fromisoformat(v.strip()).isoformat()


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    notes: Optional[str] = None


class PaymentProofRequest(BaseModel):
    payment_proof_url: str = Field(min_length=1)
