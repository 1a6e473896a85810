"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class CartItem(BaseModel):
    """Item in a shopping cart"""
    item_id: str = Field(alias="itemId")
    name: Optional[str] = None
    price: float = Field(default=0.0, ge=0)
    image: Optional[str] = None
    type: Optional[str] = None
    qty: int = Field(gt=0)

    class Config:
        populate_by_name = True


class Cart(BaseModel):
    """Snapshot of a cart and its derived values"""
    cart_id: str
    items: list[CartItem] = []
    count: int = 0
    total: str = "0.00"


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    item: dict[str, Any]
    qty: float = 1


class DecrementCartItemRequest(BaseModel):
    """Request to lower an item's quantity"""
    step: float = 1


class UpdateCartItemRequest(BaseModel):
    """Request to set an item's quantity; zero or less removes it"""
    qty: float


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    message: Optional[str] = None
