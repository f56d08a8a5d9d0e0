"""
Cas d'usage 'invoices': orchestre line_items, gateway_client et l'extraction du lien de paiement.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from backend.errors import GatewayError
from . import line_items
from .gateway_client import GatewayClient, extract_redirect_url
from .models import InvoiceRequest, InvoiceResult

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "Unknown Buyer"
DEFAULT_CUSTOMER_EMAIL = "no-reply@yourdomain.com"
DEFAULT_CUSTOMER_PHONE = "0000000000"
DEFAULT_SERVICE_NAME = "Order Payment"
EXPIRY_DAYS = 7

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""

def customer_full_name(first_name: Any, last_name: Any) -> str:
    name = " ".join(part for part in (_text(first_name), _text(last_name)) if part)
    return name or DEFAULT_CUSTOMER_NAME

def build_invoice_request(payload: Dict[str, Any], entity_activity_id: str, now: Optional[datetime] = None) -> InvoiceRequest:
    """
    Construit la requête d'upload GoPay à partir du corps /api/create-invoice.
    - Champs client absents -> valeurs par défaut (Unknown Buyer, email/téléphone génériques).
    - billNumber absent -> horodatage epoch en millisecondes.
    - issueDate = aujourd'hui, expireDate = aujourd'hui + 7 jours (format YYYY-MM-DD).
    - Soulève ValidationError si le panier est vide (aucun appel GoPay).
    """
    now = now or _now()
    bill_lines = line_items.build_bill_lines(payload.get("items"), payload.get("shippingCost"))
    return InvoiceRequest(
        bill_number=_text(payload.get("billNumber")) or str(int(now.timestamp() * 1000)),
        entity_activity_id=entity_activity_id,
        customer_full_name=customer_full_name(payload.get("firstName"), payload.get("lastName")),
        customer_email_address=_text(payload.get("email")) or DEFAULT_CUSTOMER_EMAIL,
        customer_mobile_number=_text(payload.get("phone")) or DEFAULT_CUSTOMER_PHONE,
        issue_date=_text(payload.get("issueDate")) or now.date().isoformat(),
        expire_date=_text(payload.get("expireDate")) or (now + timedelta(days=EXPIRY_DAYS)).date().isoformat(),
        service_name=_text(payload.get("serviceName")) or DEFAULT_SERVICE_NAME,
        bill_item_list=bill_lines,
        total_amount=line_items.format_amount(payload.get("amount")),
    )

def _gateway_data(body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    data = (body or {}).get("data")
    return data if isinstance(data, dict) else {}

async def resolve_redirect_url(client: GatewayClient, bill_number: str) -> Optional[str]:
    """Lit le champ qr de /bill/info et en extrait le lien de paiement (None si indisponible)."""
    info = await client.fetch_bill_info(bill_number)
    redirect_url = extract_redirect_url(_gateway_data(info).get("qr"))
    if not redirect_url:
        logger.warning("invoices.resolve_redirect_url no payment URL for billNumber=%s", bill_number)
    return redirect_url

async def create_invoice(
    payload: Dict[str, Any],
    client: GatewayClient,
    *,
    qr_delay: Optional[float] = None,
    now: Optional[datetime] = None,
) -> InvoiceResult:
    """
    Crée une facture GoPay et récupère son lien de paiement.
    Étapes (chacune conditionnée par la précédente):
      1) Valider le panier (ValidationError si vide)
      2) Construire InvoiceRequest (line_items + valeurs par défaut)
      3) Upload (client.create_invoice); GatewayError si billNumber absent de la réponse
      4) Attendre qr_delay (génération asynchrone du QR côté GoPay), puis fetch_bill_info
         avec le billNumber attribué par GoPay; lien absent -> redirect_url=None (non bloquant)
    """
    invoice = build_invoice_request(payload, client.settings.entity_activity_id, now=now)

    body = await client.create_invoice(invoice)
    bill_number = _text(_gateway_data(body).get("billNumber"))
    if not bill_number:
        logger.error("invoices.create_invoice no billNumber in GoPay response=%s", body)
        raise GatewayError("No billNumber returned by GoPay.", status_code=500)

    delay = client.settings.qr_delay if qr_delay is None else qr_delay
    logger.info("invoices.create_invoice waiting %ss before fetching bill info billNumber=%s", delay, bill_number)
    await asyncio.sleep(delay)

    redirect_url = await resolve_redirect_url(client, bill_number)
    return InvoiceResult(bill_number=bill_number, redirect_url=redirect_url)
