"""
PayPal Orders API Client

HTTP client for the processor's order/capture API.
Each public call obtains a fresh bearer token through the client-credential
exchange and makes a single attempt; upstream status codes and error bodies
are surfaced unchanged through PayPalError.
"""

import time
import logging
from typing import Optional, Any

import httpx

from ..errors import ConfigurationError, PayPalError

logger = logging.getLogger(__name__)


def _json_or_empty(response: httpx.Response) -> Any:
    """Decode a JSON body; unparsable bodies read as {}"""
    try:
        return response.json()
    except ValueError:
        return {}


class PayPalClient:
    """
    Client for the PayPal REST API.

    Usage:
        client = PayPalClient.from_settings(settings)
        order = await client.create_order(payload)
        capture = await client.capture_order(order["id"])
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        client_id: Optional[str],
        client_secret: Optional[str],
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize PayPal client.

        Args:
            base_url: API root, e.g. https://api-m.paypal.com
            client_id: REST app client id
            client_secret: REST app secret
            http_client: Shared AsyncClient (tests inject a mock transport)
            timeout: Request timeout when creating our own client
        """
        self.base_url = (base_url or "").rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings, http_client: Optional[httpx.AsyncClient] = None) -> "PayPalClient":
        """Create client from application settings"""
        return cls(
            base_url=settings.paypal_base_url,
            client_id=settings.paypal_client_id,
            client_secret=settings.paypal_client_secret,
            http_client=http_client,
        )

    async def close(self) -> None:
        """Close HTTP client"""
        if self._owns_client:
            await self._http_client.aclose()

    def missing_settings(self) -> list[str]:
        missing = []
        if not self.client_id:
            missing.append("PAYPAL_CLIENT_ID")
        if not self.client_secret:
            missing.append("PAYPAL_CLIENT_SECRET")
        if not self.base_url:
            missing.append("PAYPAL_BASE_URL")
        return missing

    def _assert_configured(self) -> None:
        missing = self.missing_settings()
        if missing:
            raise ConfigurationError(f"Missing env: {', '.join(missing)}")

    # ==================== Auth ====================

    async def get_access_token(self) -> str:
        """Exchange client credentials for a bearer token"""
        self._assert_configured()

        response = await self._http_client.post(
            f"{self.base_url}/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            content="grant_type=client_credentials",
        )
        body = _json_or_empty(response)

        if not response.is_success:
            reason = None
            if isinstance(body, dict):
                reason = body.get("error_description") or body.get("error")
            reason = reason or f"{response.status_code} {response.reason_phrase}"
            logger.error(f"Token request failed: {response.status_code} - {reason}")
            raise PayPalError(
                f"PayPal token error: {reason}",
                status_code=response.status_code,
                detail=body,
            )

        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not access_token:
            logger.error("Token response had no access_token")
            raise PayPalError(
                "PayPal token error: missing access_token",
                status_code=502,
                detail=body,
            )

        return access_token

    async def _authorized_post(
        self,
        path: str,
        error_message: str,
        json_body: Optional[dict] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """POST with a fresh bearer token; non-2xx raises PayPalError"""
        access_token = await self.get_access_token()

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        response = await self._http_client.post(
            f"{self.base_url}{path}",
            headers=headers,
            json=json_body,
        )
        body = _json_or_empty(response)

        if not response.is_success:
            logger.error(f"PayPal {error_message}: {response.status_code} - {response.text}")
            raise PayPalError(error_message, status_code=response.status_code, detail=body)

        return body

    # ==================== Orders ====================

    async def create_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a checkout order from a prepared payload"""
        order = await self._authorized_post(
            "/v2/checkout/orders",
            error_message="create order failed",
            json_body=payload,
        )
        logger.info(f"Created PayPal order {order.get('id') if isinstance(order, dict) else None}")
        return order

    async def capture_order(self, order_id: str) -> dict[str, Any]:
        """Capture payment for an approved order"""
        return await self._authorized_post(
            f"/v2/checkout/orders/{order_id}/capture",
            error_message="capture failed",
            json_body={},
            extra_headers={"PayPal-Request-Id": f"{order_id}-{int(time.time() * 1000)}"},
        )

    # ==================== Client SDK ====================

    async def generate_client_token(self) -> str:
        """Client token for the JS SDK's hosted fields"""
        body = await self._authorized_post(
            "/v1/identity/generate-token",
            error_message="generate-token failed",
            extra_headers={"Accept-Language": "en_GB"},
        )
        return body.get("client_token")
