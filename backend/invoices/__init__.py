"""
Module 'invoices' (feature-first): point d'entrée public.
Réunit lignes de facture, client GoPay et orchestration de création de facture.
"""

from .line_items import build_bill_lines, format_amount
from .gateway_client import GatewayClient, extract_redirect_url, get_gateway_client
from .service import build_invoice_request, create_invoice

__all__ = [
    # line items
    "build_bill_lines",
    "format_amount",
    # gateway
    "GatewayClient",
    "extract_redirect_url",
    "get_gateway_client",
    # services
    "build_invoice_request",
    "create_invoice",
]
