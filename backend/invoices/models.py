# module backend.invoices.models
"""
Schémas (pydantic) échangés avec le front et la passerelle GoPay.
Les noms Python sont en snake_case; les alias reprennent le format camelCase attendu par GoPay.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# GoPay accepte uniquement ces taux de TVA
VAT_RATES = ("EXE", "0.0", "0.05", "0.15")
DEFAULT_VAT_RATE = "0.15"


class CartItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(min_length=1)
    product_name: str = Field(default="", alias="productName")
    quantity: int = Field(gt=0)
    subtotal: Decimal


class BillLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    reference: str
    name: str
    quantity: int
    unit_price: str = Field(alias="unitPrice")
    discount: int = 0
    vat_rate: str = Field(default=DEFAULT_VAT_RATE, alias="vat")


class InvoiceRequest(BaseModel):
    """Requête d'upload envoyée à {base}/simple/upload (non modifiée après construction)."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    bill_number: str = Field(alias="billNumber")
    entity_activity_id: str = Field(alias="entityActivityId")
    customer_full_name: str = Field(alias="customerFullName")
    customer_email_address: str = Field(alias="customerEmailAddress")
    customer_mobile_number: str = Field(alias="customerMobileNumber")
    issue_date: str = Field(alias="issueDate")
    expire_date: str = Field(alias="expireDate")
    service_name: str = Field(alias="serviceName")
    bill_item_list: List[BillLine] = Field(alias="billItemList")
    total_amount: str = Field(alias="totalAmount")
    is_public_view: bool = Field(default=True, alias="isPublicView")
    show_online_pay_now_button: bool = Field(default=True, alias="showOnlinePayNowButton")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class InvoiceResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bill_number: str = Field(alias="billNumber")
    redirect_url: Optional[str] = Field(default=None, alias="redirectUrl")

    def to_response(self) -> dict:
        return {"success": True, **self.model_dump(by_alias=True)}
