import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from backend.errors import ValidationError
from backend.utils.rate_limit import optional_rate_limit
from backend.invoices import service as invoices_service
from backend.invoices.gateway_client import GatewayClient, get_gateway_client

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Invoices API"])

# module backend.invoices.views
@router.post("/create-invoice", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_invoice(request: Request, client: GatewayClient = Depends(get_gateway_client)):
    """
    Crée une facture GoPay pour le panier du front et renvoie le lien de paiement.
    - Entrée JSON: {firstName, lastName, phone, email, billNumber?, issueDate?, expireDate?,
      serviceName?, items: [{id, productName, quantity, subtotal}], amount, shippingCost?}
    - Réponse: {success: true, billNumber, redirectUrl} (redirectUrl peut être null)
    - Erreurs: 400 panier vide/JSON invalide, statut GoPay + corps amont si l'upload échoue,
      500 si GoPay ne renvoie pas de billNumber
    """
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")

    result = await invoices_service.create_invoice(body, client)
    logger.info("invoices.create_invoice billNumber=%s redirect=%s", result.bill_number, bool(result.redirect_url))
    return result.to_response()

@router.get("/bill-info/{bill_number}")
async def bill_info(bill_number: str, client: GatewayClient = Depends(get_gateway_client)):
    """
    Diagnostic: relaie la réponse GoPay /bill/info pour une facture.
    - 404 si la passerelle ne renvoie rien d'exploitable.
    """
    info = await client.fetch_bill_info(bill_number)
    if info is None:
        return JSONResponse(status_code=404, content={"error": "Bill info unavailable"})
    return info
