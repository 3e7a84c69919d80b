"""Custom exceptions for furniture-inventory."""
from typing import Any, Dict, List, Optional


class InventoryError(Exception):
    """Base exception for all furniture-inventory errors."""

    pass


class SourceFormatError(InventoryError):
    """Raised when a source spreadsheet cannot be read at all."""

    pass


class SourceFileNotFoundError(SourceFormatError):
    """Raised when the source file does not exist."""

    pass


class UnsupportedFormatError(SourceFormatError):
    """Raised when the source file extension is not CSV or Excel."""

    pass


class PlacementError(InventoryError):
    """Base exception for point placement errors."""

    pass


class PlacementOutOfBoundsError(PlacementError):
    """Raised when a placement falls outside the floor-plan image."""

    def __init__(self, x: float, y: float):
        super().__init__(f"Coordinates ({x}, {y}) are outside the floor plan (expected 0-1)")
        self.x = x
        self.y = y


class ConfigurationError(PlacementError):
    """Raised when an imported coordinate configuration is invalid."""

    pass


class ReservationValidationError(InventoryError):
    """Raised when a reservation request fails validation."""

    def __init__(self, messages: List[str]):
        super().__init__('; '.join(messages))
        self.messages = messages


# Banner texts shown to users, keyed by API error code
ERROR_MESSAGES = {
    'validationError': 'Les données envoyées sont invalides',
    'unauthorized': 'Authentification requise',
    'forbidden': 'Accès refusé',
    'notFound': 'Ressource introuvable',
    'serverError': 'Erreur interne du serveur',
    'apiUnavailable': "L'API est temporairement indisponible",
    'networkError': "Impossible de contacter l'API",
    'generic': 'Une erreur est survenue',
}


class ApiError(InventoryError):
    """Raised when a call to the inventory REST API fails."""

    def __init__(self, error_code: str, message: str, status_code: int = 0,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def localized_message(self) -> str:
        """Message suitable for the UI banner."""
        return ERROR_MESSAGES.get(self.error_code) or self.message or ERROR_MESSAGES['generic']
