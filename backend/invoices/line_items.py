"""
Logique panier pure (pas de GoPay, pas de DB): panier -> lignes facturables GoPay.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from backend.errors import ValidationError
from .models import BillLine, CartItem, DEFAULT_VAT_RATE

CENTS = Decimal("0.01")
EMPTY_CART_MESSAGE = "Empty cart: no items to bill."

# module backend.invoices.line_items
def to_decimal(value: Any) -> Optional[Decimal]:
    """Convertit str|int|float|Decimal en Decimal; None si absent ou non numérique."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None

def format_amount(value: Any) -> str:
    """
    Formate un montant en chaîne à deux décimales (arrondi half-up), ex: 12.345 -> "12.35".
    - Valeur absente ou non numérique -> "0.00".
    - Montant trop grand pour deux décimales (précision Decimal dépassée) -> ValidationError(400).
    """
    amount = to_decimal(value)
    if amount is None:
        amount = Decimal(0)
    try:
        return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError(f"Amount out of range: {value}")

def parse_cart_item(raw: Dict[str, Any]) -> CartItem:
    if not isinstance(raw, dict):
        raise ValidationError("Invalid cart item")
    try:
        return CartItem.model_validate(raw)
    except PydanticValidationError as e:
        # quantity <= 0 tombe ici: division par zéro impossible en aval
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ValidationError(f"Invalid cart item {raw.get('id')!r}: {fields}")

def to_bill_line(item: CartItem) -> BillLine:
    unit_price = format_amount(item.subtotal / item.quantity)
    return BillLine(
        reference=item.id,
        name=item.product_name,
        quantity=item.quantity,
        unit_price=unit_price,
        vat_rate=DEFAULT_VAT_RATE,
    )

def shipping_line(shipping_cost: Any) -> Optional[BillLine]:
    """Ligne 'shipping' si le coût est un nombre > 0, sinon None."""
    cost = to_decimal(shipping_cost)
    if cost is None or cost <= 0:
        return None
    return BillLine(
        reference="shipping",
        name="Shipping",
        quantity=1,
        unit_price=format_amount(cost),
        vat_rate=DEFAULT_VAT_RATE,
    )

def build_bill_lines(items: Any, shipping_cost: Any = None) -> List[BillLine]:
    """
    Construit les lignes GoPay à partir du panier [{id, productName, quantity, subtotal}, ...].
    - Une ligne par article, dans l'ordre: unitPrice = subtotal / quantity (2 décimales).
    - Ajoute une ligne 'shipping' si shipping_cost > 0.
    - Soulève ValidationError(400) si le panier est vide ou un article invalide.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError(EMPTY_CART_MESSAGE)
    lines = [to_bill_line(parse_cart_item(raw)) for raw in items]
    shipping = shipping_line(shipping_cost)
    if shipping is not None:
        lines.append(shipping)
    return lines
