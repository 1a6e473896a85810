"""API tests: routes -> reconciliation -> PayPal client (mock transport)."""

from fastapi.testclient import TestClient


class TestCreateOrder:

    def test_accepted_order_is_forwarded(self, test_client: TestClient, fake_paypal):
        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "8.00", "userId": "user-1", "items": [
                {"itemId": "egg", "name": "Egg", "price": 10, "qty": 1},
                {"itemId": "promo", "name": "Promo", "price": -2, "qty": 1},
            ]},
        )

        assert response.status_code == 200
        assert response.json() == {"id": "ORDER-1", "status": "CREATED"}
        unit = fake_paypal.last_json("/v2/checkout/orders")["purchase_units"][0]
        assert unit["amount"] == {
            "currency_code": "EUR",
            "value": "8.00",
            "breakdown": {
                "item_total": {"currency_code": "EUR", "value": "10.00"},
                "discount": {"currency_code": "EUR", "value": "2.00"},
            },
        }
        assert [item["sku"] for item in unit["items"]] == ["egg"]

    def test_amount_mismatch_is_rejected_before_calling_paypal(self, test_client: TestClient, fake_paypal):
        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": 5, "userId": "user-1", "items": [{"price": 10, "qty": 1}]},
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Amount mismatch",
            "detail": {"clientAmount": "5.00", "computedNet": "10.00"},
        }
        assert fake_paypal.requests == []

    def test_invalid_amount(self, test_client: TestClient):
        response = test_client.post("/api/paypal/orders", json={"amount": "zero", "userId": "u"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount"

    def test_missing_user_id(self, test_client: TestClient):
        response = test_client.post("/api/paypal/orders", json={"amount": 10, "items": [{"price": 10}]})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing userId"

    def test_empty_body(self, test_client: TestClient):
        response = test_client.post("/api/paypal/orders")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount"

    def test_non_object_body_is_read_as_empty(self, test_client: TestClient):
        response = test_client.post("/api/paypal/orders", json=[1, 2])

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount"

    def test_oversized_amount_is_invalid(self, test_client: TestClient, fake_paypal):
        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "1e30", "userId": "user-1", "items": [{"price": 10, "qty": 1}]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid amount"
        assert fake_paypal.requests == []

    def test_oversized_price_is_a_mismatch(self, test_client: TestClient, fake_paypal):
        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "10", "userId": "user-1", "items": [{"price": "1e30", "qty": "1e30"}]},
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Amount mismatch",
            "detail": {"clientAmount": "10.00", "computedNet": "0.00"},
        }
        assert fake_paypal.requests == []

    def test_invalid_currency(self, test_client: TestClient, fake_paypal):
        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "10", "userId": "user-1", "currency": 5, "items": [{"price": 10}]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid currency"
        assert fake_paypal.requests == []

    def test_token_response_without_access_token_is_bad_gateway(self, test_client: TestClient, fake_paypal):
        fake_paypal.token_body = {"token_type": "Bearer"}

        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "20.00", "userId": "user-1", "items": [{"price": 10, "qty": 2}]},
        )

        assert response.status_code == 502
        assert response.json()["error"] == "PayPal token error: missing access_token"

    def test_upstream_error_is_passed_through(self, test_client: TestClient, fake_paypal):
        fake_paypal.order_status = 422
        fake_paypal.order_body = {"name": "UNPROCESSABLE_ENTITY"}

        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "20.00", "userId": "user-1", "items": [{"price": 10, "qty": 2}]},
        )

        assert response.status_code == 422
        assert response.json() == {"error": "create order failed", "detail": {"name": "UNPROCESSABLE_ENTITY"}}

    def test_token_failure_status_is_propagated(self, test_client: TestClient, fake_paypal):
        fake_paypal.token_status = 401

        response = test_client.post(
            "/api/paypal/orders",
            json={"amount": "20.00", "userId": "user-1", "items": [{"price": 10, "qty": 2}]},
        )

        assert response.status_code == 401
        assert response.json()["error"].startswith("PayPal token error")


class TestCaptureAndHelpers:

    def test_capture(self, test_client: TestClient):
        response = test_client.post("/api/paypal/orders/ORDER-1/capture")

        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"

    def test_capture_failure(self, test_client: TestClient, fake_paypal):
        fake_paypal.capture_status = 422
        fake_paypal.capture_body = {"name": "ORDER_NOT_APPROVED"}

        response = test_client.post("/api/paypal/orders/ORDER-1/capture")

        assert response.status_code == 422
        assert response.json() == {"error": "capture failed", "detail": {"name": "ORDER_NOT_APPROVED"}}

    def test_client_token(self, test_client: TestClient):
        response = test_client.get("/api/paypal/client-token")

        assert response.json() == {"client_token": "client-token-123"}

    def test_ping(self, test_client: TestClient):
        assert test_client.get("/api/paypal/ping").json() == {"ok": True}

    def test_ping_reports_missing_configuration(self, test_client: TestClient, make_paypal_client):
        from checkout_service.main import app
        from checkout_service.routes.paypal import get_paypal_client

        unconfigured = make_paypal_client(client_id=None, client_secret=None)
        app.dependency_overrides[get_paypal_client] = lambda: unconfigured

        response = test_client.get("/api/paypal/ping")

        assert response.status_code == 500
        assert response.json()["error"].startswith("Missing env")

    def test_sdk_config_and_debug_env(self, test_client: TestClient):
        config = test_client.get("/api/paypal/sdk-config").json()
        assert config["intent"] == "capture"
        assert "currency" in config

        debug = test_client.get("/api/paypal/debug/env").json()
        assert set(debug) == {"base", "clientIdSuffix", "hasSecret"}

    def test_health(self, test_client: TestClient):
        assert test_client.get("/").text == "ok"
        assert test_client.get("/healthz").json() == {"status": "ok"}


class TestCartApi:

    def test_cart_lifecycle(self, test_client: TestClient):
        cart_id = test_client.post("/api/cart").json()["cart"]["cart_id"]

        response = test_client.post(
            f"/api/cart/{cart_id}/items",
            json={"item": {"itemId": "egg", "name": "Egg", "price": 10}, "qty": 2},
        )
        cart = response.json()["cart"]
        assert cart["count"] == 2
        assert cart["total"] == "20.00"
        assert cart["items"][0]["itemId"] == "egg"

        cart = test_client.post(f"/api/cart/{cart_id}/items/egg/decrement", json={"step": 1}).json()["cart"]
        assert cart["count"] == 1

        cart = test_client.put(f"/api/cart/{cart_id}/items/egg", json={"qty": 5}).json()["cart"]
        assert cart["total"] == "50.00"

        cart = test_client.put(f"/api/cart/{cart_id}/items/egg", json={"qty": 0}).json()["cart"]
        assert cart["items"] == []

    def test_remove_and_clear(self, test_client: TestClient):
        cart_id = test_client.post("/api/cart").json()["cart"]["cart_id"]
        test_client.post(f"/api/cart/{cart_id}/items", json={"item": {"id": "a", "price": 1}})
        test_client.post(f"/api/cart/{cart_id}/items", json={"item": {"id": "b", "price": 2}})

        cart = test_client.delete(f"/api/cart/{cart_id}/items/a").json()["cart"]
        assert [item["itemId"] for item in cart["items"]] == ["b"]

        cart = test_client.delete(f"/api/cart/{cart_id}").json()["cart"]
        assert cart["items"] == []

    def test_non_string_item_fields_are_accepted(self, test_client: TestClient):
        cart_id = test_client.post("/api/cart").json()["cart"]["cart_id"]

        response = test_client.post(
            f"/api/cart/{cart_id}/items",
            json={"item": {"itemId": "a", "name": 5, "type": 7, "price": 1}},
        )

        assert response.status_code == 200
        item = response.json()["cart"]["items"][0]
        assert item["name"] == "5"
        assert item["type"] == "7"

    def test_unknown_cart(self, test_client: TestClient):
        response = test_client.get("/api/cart/does-not-exist")

        assert response.status_code == 404
