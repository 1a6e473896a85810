# Checkout Service Models

from .cart import (
    Cart,
    CartItem,
    AddToCartRequest,
    DecrementCartItemRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from .order import (
    OrderCreateRequest,
    Money,
    OrderLineItem,
    AmountBreakdown,
    PurchaseAmount,
    PurchaseUnit,
    ApplicationContext,
    OrderPayload,
)

__all__ = [
    "Cart",
    "CartItem",
    "AddToCartRequest",
    "DecrementCartItemRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "OrderCreateRequest",
    "Money",
    "OrderLineItem",
    "AmountBreakdown",
    "PurchaseAmount",
    "PurchaseUnit",
    "ApplicationContext",
    "OrderPayload",
]
