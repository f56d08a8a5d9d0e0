import logging
from typing import Any, Dict

from fastapi import APIRouter, Body

from backend.notifications import service as notifications_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["GoPay Webhooks"])

# module backend.notifications.views
@router.post("/payment-notification")
def payment_notification(payload: Dict[str, Any] = Body(...)):
    """
    Webhook GoPay: notification de paiement.
    - Body: {billNumber, paymentStatus, paymentAmount?, paymentDate?}
    - Upsert dans la table payments (clé bill_number), champs existants conservés.
    - Réponses: {"status": 200, "message": ...}; 400 si champs requis manquants; 500 si écriture impossible.
    """
    logger.info("Incoming payment notification: %s", payload)
    return notifications_service.record_payment(payload)

@router.post("/settlement-notification")
def settlement_notification(payload: Dict[str, Any] = Body(...)):
    """
    Webhook GoPay: notification de règlement bancaire.
    - Body: {billNumber, settlementStatus, paymentAmount?, paymentDate?, bankId?}
    - bankId absent -> "Unknown".
    """
    logger.info("Incoming settlement notification: %s", payload)
    return notifications_service.record_settlement(payload)
