"""
Adaptateur GoPay: centralise les appels HTTP et les en-têtes d'authentification de la passerelle.
"""
import logging
import re
from typing import Any, Dict, Optional

import httpx

from backend.config import GatewaySettings
from backend.errors import GatewayError
from .models import InvoiceRequest

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/simple/upload"
BILL_INFO_PATH = "/bill/info"

# Lien de vérification GoPay noyé dans le texte libre du champ "qr"
REDIRECT_URL_PATTERN = re.compile(r"https://\S*verify/bill\?billNumber=[A-Za-z0-9]+")

# module backend.invoices.gateway_client
def extract_redirect_url(qr_text: Any) -> Optional[str]:
    """
    Extrait l'URL de paiement (…/verify/bill?billNumber=<token>) du texte QR.
    Best-effort: retourne None si le texte est vide ou ne contient pas de lien.
    """
    if not isinstance(qr_text, str) or not qr_text:
        return None
    match = REDIRECT_URL_PATTERN.search(qr_text)
    return match.group(0) if match else None

def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text

class GatewayClient:
    """
    Client GoPay (une tentative par appel, pas de retry).
    - Authentification par en-têtes personnalisés username/password (pas de Basic Auth).
    - Timeout explicite sur chaque appel (settings.timeout).
    - transport: injectable (httpx.MockTransport en tests).
    """

    def __init__(self, settings: GatewaySettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "username": self.settings.username,
            "password": self.settings.password,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.base_url,
            headers=self.headers,
            timeout=self.settings.timeout,
            transport=self._transport,
        )

    async def create_invoice(self, invoice: InvoiceRequest) -> Dict[str, Any]:
        """
        Upload d'une facture (POST {base}/simple/upload).
        Retour: JSON GoPay (ex: {"data": {"billNumber": "..."}}).
        Erreurs: GatewayError avec le statut et le corps amont tels quels.
        """
        payload = invoice.to_payload()
        logger.info("gateway.create_invoice request billNumber=%s payload=%s", invoice.bill_number, payload)
        try:
            async with self._client() as client:
                response = await client.post(UPLOAD_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.error("gateway.create_invoice transport error billNumber=%s: %r", invoice.bill_number, e)
            raise GatewayError(f"GoPay unreachable: {e}")

        body = _decode_body(response)
        logger.info("gateway.create_invoice response status=%s body=%s", response.status_code, body)
        if response.is_error:
            raise GatewayError("GoPay rejected the invoice", status_code=response.status_code, payload=body)
        if not isinstance(body, dict):
            raise GatewayError("Malformed GoPay response", payload=body)
        return body

    async def fetch_bill_info(self, bill_number: str) -> Optional[Dict[str, Any]]:
        """
        Informations de paiement d'une facture (GET {base}/bill/info?billNumber=...).
        Ne lève jamais: retourne None si la passerelle échoue (usage diagnostic / QR best-effort).
        """
        logger.info("gateway.fetch_bill_info request billNumber=%s", bill_number)
        try:
            async with self._client() as client:
                response = await client.get(BILL_INFO_PATH, params={"billNumber": bill_number})
        except httpx.HTTPError as e:
            logger.error("gateway.fetch_bill_info transport error billNumber=%s: %r", bill_number, e)
            return None

        body = _decode_body(response)
        logger.info("gateway.fetch_bill_info response status=%s body=%s", response.status_code, body)
        if response.is_error or not isinstance(body, dict):
            return None
        return body

_gateway_client: Optional[GatewayClient] = None

def get_gateway_client() -> GatewayClient:
    """Instance partagée construite depuis GATEWAY_SETTINGS (dépendance FastAPI, surchargée en tests)."""
    global _gateway_client
    if _gateway_client is None:
        from backend.config import GATEWAY_SETTINGS
        _gateway_client = GatewayClient(GATEWAY_SETTINGS)
    return _gateway_client
