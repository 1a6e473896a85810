# Checkout services

from .paypal_client import PayPalClient
from .reconciliation import OrderBuilder, ReconciledOrder, normalize_items, compute_totals

__all__ = [
    "PayPalClient",
    "OrderBuilder",
    "ReconciledOrder",
    "normalize_items",
    "compute_totals",
]
