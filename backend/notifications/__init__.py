"""
Module 'notifications' (feature-first): webhooks GoPay de paiement et de règlement.
"""

from .repository import upsert_payment, upsert_settlement
from .service import record_payment, record_settlement

__all__ = [
    # repository
    "upsert_payment",
    "upsert_settlement",
    # services
    "record_payment",
    "record_settlement",
]
