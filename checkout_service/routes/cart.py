"""Cart API routes for the storefront"""

from fastapi import APIRouter, HTTPException, Depends

from ..models.cart import (
    AddToCartRequest,
    DecrementCartItemRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from ..database.carts import cart_db, CartDatabase, CartStore

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def get_cart_db() -> CartDatabase:
    return cart_db


def _get_cart(cart_id: str, db: CartDatabase) -> CartStore:
    cart = db.get_cart(cart_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@router.post("", response_model=CartResponse)
async def create_cart(db: CartDatabase = Depends(get_cart_db)):
    """Create a new shopping cart"""
    cart = db.create_cart()
    return CartResponse(cart=cart.snapshot(), message="Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, db: CartDatabase = Depends(get_cart_db)):
    """Get cart by ID"""
    return CartResponse(cart=_get_cart(cart_id, db).snapshot())


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(
    cart_id: str,
    request: AddToCartRequest,
    db: CartDatabase = Depends(get_cart_db),
):
    """Add an item to the cart; invalid quantities are ignored"""
    cart = _get_cart(cart_id, db)
    cart.add(request.item, request.qty)
    return CartResponse(cart=cart.snapshot(), message="Cart updated")


@router.post("/{cart_id}/items/{item_id}/decrement", response_model=CartResponse)
async def decrement_cart_item(
    cart_id: str,
    item_id: str,
    request: DecrementCartItemRequest,
    db: CartDatabase = Depends(get_cart_db),
):
    """Lower an item's quantity"""
    cart = _get_cart(cart_id, db)
    cart.decrement(item_id, request.step)
    return CartResponse(cart=cart.snapshot(), message="Cart updated")


@router.put("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    cart_id: str,
    item_id: str,
    request: UpdateCartItemRequest,
    db: CartDatabase = Depends(get_cart_db),
):
    """Set an item's quantity"""
    cart = _get_cart(cart_id, db)
    cart.set_qty(item_id, request.qty)
    return CartResponse(cart=cart.snapshot(), message="Cart updated")


@router.delete("/{cart_id}/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(
    cart_id: str,
    item_id: str,
    db: CartDatabase = Depends(get_cart_db),
):
    """Remove an item from the cart"""
    cart = _get_cart(cart_id, db)
    cart.remove(item_id)
    return CartResponse(cart=cart.snapshot(), message="Item removed")


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart_id: str, db: CartDatabase = Depends(get_cart_db)):
    """Clear all items from cart"""
    cart = _get_cart(cart_id, db)
    cart.clear()
    return CartResponse(cart=cart.snapshot(), message="Cart cleared")
