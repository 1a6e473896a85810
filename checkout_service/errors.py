"""Checkout error types.

Every error carries the HTTP status it should surface with and an optional
``detail`` payload, rendered to clients as ``{"error": ..., "detail": ...}``.
"""

from typing import Any, Optional


class CheckoutError(Exception):
    """Base exception for checkout failures"""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "detail": self.detail}


class OrderValidationError(CheckoutError):
    """Malformed order request (amount, user id, minimum total)"""

    status_code = 400


class AmountMismatchError(OrderValidationError):
    """Client-declared amount diverges from the recomputed net"""

    def __init__(self, client_amount: str, computed_net: str):
        super().__init__(
            "Amount mismatch",
            detail={"clientAmount": client_amount, "computedNet": computed_net},
        )
        self.client_amount = client_amount
        self.computed_net = computed_net


class ConfigurationError(CheckoutError):
    """Required processor settings are missing"""

    status_code = 500


class PayPalError(CheckoutError):
    """Upstream processor returned a non-2xx response"""
    pass
