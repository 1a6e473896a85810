"""Shared fixtures for checkout service tests."""

import json
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from checkout_service.database.carts import CartDatabase
from checkout_service.database.storage import MemoryStorage
from checkout_service.main import app
from checkout_service.routes.cart import get_cart_db
from checkout_service.routes.paypal import get_order_builder, get_paypal_client
from checkout_service.services.paypal_client import PayPalClient
from checkout_service.services.reconciliation import OrderBuilder

PAYPAL_BASE = "https://api.paypal.test"


class FakePayPal:
    """Records requests and answers like the PayPal REST API."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_body: dict = {"access_token": "A21-token", "expires_in": 32400}
        self.order_status = 201
        self.capture_status = 201
        self.order_body: dict = {"id": "ORDER-1", "status": "CREATED"}
        self.capture_body: dict = {"id": "ORDER-1", "status": "COMPLETED"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/oauth2/token":
            if self.token_status != 200:
                return httpx.Response(
                    self.token_status,
                    json={"error": "invalid_client", "error_description": "Client Authentication failed"},
                )
            return httpx.Response(200, json=self.token_body)

        if path == "/v2/checkout/orders":
            return httpx.Response(self.order_status, json=self.order_body)

        if path.endswith("/capture"):
            return httpx.Response(self.capture_status, json=self.capture_body)

        if path == "/v1/identity/generate-token":
            return httpx.Response(200, json={"client_token": "client-token-123"})

        return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})

    def last_json(self, path: str) -> dict:
        request = next(r for r in reversed(self.requests) if r.url.path == path)
        return json.loads(request.content.decode())


@pytest.fixture
def fake_paypal() -> FakePayPal:
    return FakePayPal()


@pytest.fixture
def make_paypal_client(fake_paypal: FakePayPal) -> Callable[..., PayPalClient]:
    def factory(client_id="client-id", client_secret="client-secret") -> PayPalClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_paypal.handler))
        return PayPalClient(
            base_url=PAYPAL_BASE,
            client_id=client_id,
            client_secret=client_secret,
            http_client=http_client,
        )

    return factory


@pytest.fixture
def order_builder() -> OrderBuilder:
    return OrderBuilder(public_base_url="https://shop.example", brand_name="Test Store")


@pytest.fixture
def cart_database() -> CartDatabase:
    return CartDatabase(MemoryStorage())


@pytest.fixture
def test_client(make_paypal_client, order_builder, cart_database):
    paypal_client = make_paypal_client()
    app.dependency_overrides[get_paypal_client] = lambda: paypal_client
    app.dependency_overrides[get_order_builder] = lambda: order_builder
    app.dependency_overrides[get_cart_db] = lambda: cart_database
    yield TestClient(app)
    app.dependency_overrides.clear()
