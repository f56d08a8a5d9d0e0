"""
Accès aux données pour la feature 'notifications' (tables payments / settlements).
"""
from typing import Any, Dict, Optional
import logging
import backend.infra.supabase_client as supabase_client
from backend.config import PAYMENTS_TABLE, SETTLEMENTS_TABLE

logger = logging.getLogger(__name__)

KEY_COLUMN = "bill_number"

# module backend.notifications.repository
def _upsert_merge(table: str, bill_number: str, fields: Dict[str, Any]) -> Optional[dict]:
    """
    Upsert fusionné (on_conflict=bill_number): crée la ligne si absente, sinon ne réécrit que
    les colonnes fournies; les autres colonnes existantes sont conservées.
    Retourne la ligne écrite (ou un dict truthy), None en cas d'erreur.
    """
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(table)
            .upsert({KEY_COLUMN: bill_number, **fields}, on_conflict=KEY_COLUMN)
            .execute()
        )
        rows = getattr(res, "data", None) or []
        if isinstance(rows, list) and rows:
            return rows[0]
        # Certaines versions de supabase-py ne renvoient pas la ligne
        return {"status": "ok"}
    except Exception:
        logger.exception("notifications.repository._upsert_merge failed table=%s bill_number=%s", table, bill_number)
        return None

def upsert_payment(bill_number: str, fields: Dict[str, Any]) -> Optional[dict]:
    return _upsert_merge(PAYMENTS_TABLE, bill_number, fields)

def upsert_settlement(bill_number: str, fields: Dict[str, Any]) -> Optional[dict]:
    return _upsert_merge(SETTLEMENTS_TABLE, bill_number, fields)
