"""
Module 'banks' (feature-first): comptes bancaires de destination des virements
et résolution des banques proposées au checkout (mode banque unique).
"""

from .resolver import (
    DEFAULT_SINGLE_BANK_MODE,
    AvailableBanks,
    get_available_banks,
    require_payment_banks,
    resolve_banks,
)

__all__ = [
    "DEFAULT_SINGLE_BANK_MODE",
    "AvailableBanks",
    "get_available_banks",
    "require_payment_banks",
    "resolve_banks",
]
