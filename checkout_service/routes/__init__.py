# API Routes

from .paypal import router as paypal_router
from .cart import router as cart_router

__all__ = ["paypal_router", "cart_router"]
