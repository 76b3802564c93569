# module backend.banks.views
"""Endpoint public des moyens de paiement.
- GET /api/v1/banks: banques proposées au checkout selon le mode banque unique.
Réponse: {"banks": [...], "singleBankMode": bool}. Une liste vide n'est pas une
erreur ici: le front affiche « aucun moyen de paiement », et la création de
commande refusera de toute façon (NoBankAvailable).
"""
from fastapi import APIRouter

from backend.banks.resolver import get_available_banks

router = APIRouter(prefix="/api/v1/banks", tags=["Banks API"])


@router.get("")
def api_available_banks():
    return get_available_banks().as_response()
