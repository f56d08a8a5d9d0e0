"""
Taxonomie d'erreurs du relais.
- ValidationError: entrée client manquante/invalide -> 400
- GatewayError: réponse amont non-2xx ou inexploitable -> statut amont (500 par défaut)
- PersistenceError: échec d'écriture Supabase -> 500, message générique
Les handlers FastAPI (backend.app_setup.exceptions) transforment ces erreurs en JSON {"error": ...}.
"""
from typing import Any, Dict, Optional


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message

    def to_content(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(RelayError):
    status_code = 400


class GatewayError(RelayError):
    """Erreur remontée par la passerelle GoPay: conserve le statut et le corps amont."""

    def __init__(self, message: str = "Gateway error", status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code or 500
        self.payload = payload

    def to_content(self) -> Dict[str, Any]:
        return {"error": self.payload if self.payload is not None else self.message}


class PersistenceError(RelayError):
    status_code = 500

    def to_content(self) -> Dict[str, Any]:
        # Le détail reste dans les logs
        return {"error": "Internal Server Error"}
