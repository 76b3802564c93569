"""
Erreurs métier partagées par les features (pricing, banks, orders, payments).

Chaque erreur porte un `code` stable (utilisé par le front) et le statut HTTP
renvoyé par le handler enregistré dans backend.app_setup.exceptions.
"""
from typing import Any, Dict, Optional


class PerdamiError(Exception):
    code = "error"
    status_code = 500
    default_message = "Erreur interne"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details: Dict[str, Any] = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PerdamiError):
    """Entrée invalide: jamais rejouée automatiquement."""
    code = "validation_error"
    status_code = 400
    default_message = "Données invalides"


class NotFoundError(PerdamiError):
    code = "not_found"
    status_code = 404
    default_message = "Ressource introuvable"


class ConflictError(PerdamiError):
    code = "conflict"
    status_code = 409
    default_message = "Conflit avec l'état actuel"


class InvalidTransition(ConflictError):
    code = "invalid_transition"
    default_message = "Transition de statut non autorisée"


class NoBankAvailable(PerdamiError):
    """Aucun compte bancaire actif: la commande ne peut pas être payée."""
    code = "no_bank_available"
    status_code = 422
    default_message = "Aucun moyen de paiement configuré"


class BankResolutionFailed(PerdamiError):
    code = "bank_resolution_failed"
    status_code = 503
    default_message = "Impossible de charger les moyens de paiement"


class PersistenceFailed(PerdamiError):
    code = "persistence_failed"
    status_code = 500
    default_message = "Écriture en base impossible"


class OrderPersistenceFailed(PersistenceFailed):
    code = "order_persistence_failed"
    default_message = "Impossible d'enregistrer la commande"


class StorageError(Exception):
    """Levée par les repositories de lecture quand Supabase est injoignable."""
