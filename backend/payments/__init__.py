"""
Module 'payments' (feature-first): point d'entrée public.
Statut de paiement des commandes réglées par virement bancaire.
"""

from .service import (
    PAYMENT_TRANSITIONS,
    map_provider_status,
    update_payment_status,
    upload_payment_proof,
)

__all__ = [
    "PAYMENT_TRANSITIONS",
    "map_provider_status",
    "update_payment_status",
    "upload_payment_proof",
]
