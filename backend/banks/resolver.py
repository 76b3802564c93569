"""
Résolution des banques proposées au paiement.

Règles:
- Réglages absents: DEFAULT_SINGLE_BANK_MODE (False), toutes les banques actives.
- Mode multi-banques: toutes les banques actives, created_at croissant.
- Mode banque unique: la banque par défaut si elle est active, sinon la plus
  ancienne banque active. Liste singleton.
- Aucune banque active: liste vide (require_payment_banks lève NoBankAvailable).

Les réglages sont lus une fois par appel (ou passés explicitement par l'appelant):
aucun cache module, aucun état partagé entre requêtes.
"""
from typing import Any, Dict, List, NamedTuple, Optional
import logging

from backend.app_settings import repository as settings_repository
from backend.banks import repository as banks_repository
from backend.errors import BankResolutionFailed, NoBankAvailable, StorageError

logger = logging.getLogger(__name__)

# Réglages introuvables: le checkout ne doit pas être bloqué, on affiche toutes les banques
DEFAULT_SINGLE_BANK_MODE = False

# Sentinelle: « charger les réglages » (None signifie « ligne absente »)
_LOAD = object()


class AvailableBanks(NamedTuple):
    banks: List[dict]
    single_bank_mode: bool

    def as_response(self) -> Dict[str, Any]:
        return {"banks": self.banks, "singleBankMode": self.single_bank_mode}


def single_bank_mode_of(settings: Optional[dict]) -> bool:
    if not settings:
        return DEFAULT_SINGLE_BANK_MODE
    return bool(settings.get("single_bank_mode", DEFAULT_SINGLE_BANK_MODE))


def resolve_banks(settings: Optional[dict], active_banks: List[dict]) -> AvailableBanks:
    """Partie pure de la résolution: active_banks doit être trié par created_at croissant."""
    single = single_bank_mode_of(settings)
    if not single:
        return AvailableBanks(list(active_banks), False)
    if not active_banks:
        return AvailableBanks([], True)

    default_id = (settings or {}).get("default_bank_id")
    if default_id:
        for bank in active_banks:
            if str(bank.get("id")) == str(default_id):
                return AvailableBanks([bank], True)
        logger.warning("Banque par défaut %s inactive ou introuvable, repli sur la plus ancienne", default_id)
    return AvailableBanks([active_banks[0]], True)


def get_available_banks(settings: Any = _LOAD) -> AvailableBanks:
    """
    Banques valides comme destination de paiement pour la requête courante.
    - settings: ligne app_settings déjà chargée (None = absente); chargée sinon.
    - BankResolutionFailed si Supabase est indisponible.
    """
    try:
        if settings is _LOAD:
            settings = settings_repository.find_app_settings()
        active = banks_repository.find_active_banks()
    except StorageError as e:
        raise BankResolutionFailed() from e
    return resolve_banks(settings, active)


def require_payment_banks(settings: Any = _LOAD) -> AvailableBanks:
    """Comme get_available_banks, mais NoBankAvailable si la liste est vide."""
    available = get_available_banks(settings)
    if not available.banks:
        raise NoBankAvailable(single_bank_mode=available.single_bank_mode)
    return available
