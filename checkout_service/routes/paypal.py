"""PayPal checkout routes: order creation, capture and SDK helpers"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

from ..core.config import settings
from ..models.order import OrderCreateRequest
from ..services.paypal_client import PayPalClient
from ..services.reconciliation import OrderBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/paypal", tags=["PayPal"])

# Shared across requests; closed on shutdown
paypal_client: Optional[PayPalClient] = None


def get_paypal_client() -> PayPalClient:
    """Get or create the PayPal client"""
    global paypal_client
    if paypal_client is None:
        paypal_client = PayPalClient.from_settings(settings)
    return paypal_client


def get_order_builder() -> OrderBuilder:
    return OrderBuilder.from_settings(settings)


@router.get("/sdk-config")
async def sdk_config():
    """JS SDK parameters, so client and server agree on currency and intent"""
    return {
        "clientId": settings.paypal_client_id or None,
        "currency": settings.paypal_currency,
        "intent": "capture",
        "env": settings.paypal_env,
    }


@router.get("/client-token")
async def client_token(client: PayPalClient = Depends(get_paypal_client)):
    """Client token for hosted card fields"""
    token = await client.generate_client_token()
    return {"client_token": token}


@router.post("/orders")
async def create_order(
    body: Any = Body(None),
    builder: OrderBuilder = Depends(get_order_builder),
    client: PayPalClient = Depends(get_paypal_client),
):
    """
    Create a processor order.

    The order total is recomputed from the submitted items: negative lines
    become a discount, zero lines are dropped, and the request is rejected
    when the recomputed net differs from the declared amount. A body that
    is not a JSON object is read as empty.
    """
    request = OrderCreateRequest.model_validate(body) if isinstance(body, dict) else OrderCreateRequest()
    order = builder.build(request)
    totals = order.totals.as_strings()
    logger.info(
        f"Creating order for {order.purchase_unit.custom_id}: "
        f"items={totals['item_total']} discount={totals['discount']} net={totals['net']}"
    )
    return await client.create_order(order.payload.to_request())


@router.post("/orders/{order_id}/capture")
async def capture_order(
    order_id: str,
    client: PayPalClient = Depends(get_paypal_client),
):
    """Capture an approved order"""
    return await client.capture_order(order_id)


@router.get("/debug/env")
async def debug_env():
    """Configuration summary without secrets"""
    client_id = settings.paypal_client_id
    return {
        "base": settings.paypal_base_url,
        "clientIdSuffix": client_id[-8:] if client_id else None,
        "hasSecret": bool(settings.paypal_client_secret),
    }


@router.get("/ping")
async def ping(client: PayPalClient = Depends(get_paypal_client)):
    """Checks that the credentials can obtain a token"""
    await client.get_access_token()
    return {"ok": True}
