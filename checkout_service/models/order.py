"""Order models: the inbound checkout request and the processor payload"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class OrderCreateRequest(BaseModel):
    """
    Request to create a processor order.

    amount, currency and userId are left untyped here; OrderBuilder validates
    them and reports bad values as 400s.
    """
    amount: Any = None
    currency: Any = None
    user_id: Any = Field(default=None, alias="userId")
    items: Any = None

    class Config:
        populate_by_name = True


class Money(BaseModel):
    """Currency amount as the processor expects it"""
    currency_code: str
    value: str


class OrderLineItem(BaseModel):
    """Line item sent to the processor"""
    name: str
    sku: str
    quantity: str
    description: str
    unit_amount: Money


class AmountBreakdown(BaseModel):
    item_total: Money
    discount: Optional[Money] = None


class PurchaseAmount(BaseModel):
    currency_code: str
    value: str
    breakdown: Optional[AmountBreakdown] = None


class PurchaseUnit(BaseModel):
    """Single purchase unit of a processor order"""
    reference_id: str = "PU-1"
    custom_id: str
    invoice_id: str
    amount: PurchaseAmount
    items: list[OrderLineItem] = []


class ApplicationContext(BaseModel):
    shipping_preference: str = "NO_SHIPPING"
    user_action: str = "PAY_NOW"
    brand_name: str
    locale: str = "en-GB"
    return_url: str
    cancel_url: str


class OrderPayload(BaseModel):
    """Body of the processor's create-order call"""
    intent: str = "CAPTURE"
    purchase_units: list[PurchaseUnit]
    application_context: ApplicationContext

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
