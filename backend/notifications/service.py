"""
Cas d'usage 'notifications': validation puis upsert des callbacks GoPay (paiement, règlement).
L'accusé de réception porte sur la réception, pas sur le résultat métier (un statut FAILED est acquitté).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from backend.errors import PersistenceError, ValidationError
from . import repository

logger = logging.getLogger(__name__)

ACK = {"status": 200, "message": "Operation Done Successfully"}
MISSING_FIELDS_MESSAGE = "Missing required fields"
UNKNOWN_BANK = "Unknown"

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def _required(payload: Dict[str, Any], *names: str) -> None:
    # Absent, vide, blanc, False ou 0: refusé
    for name in names:
        value = payload.get(name)
        if isinstance(value, str):
            value = value.strip()
        if not value:
            logger.error("notifications missing field=%s payload=%s", name, payload)
            raise ValidationError(MISSING_FIELDS_MESSAGE)

def _bill_number(payload: Dict[str, Any]) -> str:
    # " B1" et "B1" désignent la même facture
    return str(payload["billNumber"]).strip()

def _persist(upsert: Callable[[str, Dict[str, Any]], Optional[dict]], bill_number: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    row = upsert(bill_number, fields)
    if not row:
        raise PersistenceError(f"store write failed for bill {bill_number}")
    return ACK

def payment_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "payment_status": payload["paymentStatus"],
        "payment_amount": payload.get("paymentAmount") or 0,
        "payment_date": payload.get("paymentDate") or _now(),
        "updated_at": _now(),
    }

def settlement_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "settlement_status": payload["settlementStatus"],
        "payment_amount": payload.get("paymentAmount") or 0,
        "payment_date": payload.get("paymentDate") or _now(),
        "bank_id": payload.get("bankId") or UNKNOWN_BANK,
        "updated_at": _now(),
    }

def record_payment(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Enregistre une notification de paiement: {billNumber, paymentStatus, paymentAmount?, paymentDate?}.
    - ValidationError si billNumber ou paymentStatus manquant (aucune écriture).
    - PersistenceError si l'upsert échoue.
    """
    _required(payload, "billNumber", "paymentStatus")
    bill_number = _bill_number(payload)
    ack = _persist(repository.upsert_payment, bill_number, payment_fields(payload))
    logger.info("notifications.payment %s recorded for billNumber=%s", payload["paymentStatus"], bill_number)
    return ack

def record_settlement(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Enregistre une notification de règlement: {billNumber, settlementStatus, paymentAmount?, paymentDate?, bankId?}.
    """
    _required(payload, "billNumber", "settlementStatus")
    bill_number = _bill_number(payload)
    ack = _persist(repository.upsert_settlement, bill_number, settlement_fields(payload))
    logger.info("notifications.settlement %s recorded for billNumber=%s", payload["settlementStatus"], bill_number)
    return ack
