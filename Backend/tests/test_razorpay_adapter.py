"""
Tests for the Razorpay REST adapter using httpx.MockTransport.
"""
import base64
import json

import httpx
import pytest

from app.adapters.razorpay_adapter import RazorpayAdapter
from app.core.exceptions import PaymentGatewayError


def adapter_with(handler) -> RazorpayAdapter:
    return RazorpayAdapter(
        key_id="rzp_test_key",
        key_secret="rzp_test_secret",
        transport=httpx.MockTransport(handler)
    )


class TestRazorpayAdapter:

    async def test_posts_order_with_basic_auth(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["payload"] = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "order_Ntest",
                "entity": "order",
                "amount": 50000,
                "currency": "INR",
                "status": "created",
            })

        order = await adapter_with(handler).create_order(
            amount=50000,
            currency="INR",
            receipt="car-service-1",
            notes={"userId": "u1", "count": 2, "empty": None}
        )

        assert order["id"] == "order_Ntest"
        assert captured["url"] == "https://api.razorpay.com/v1/orders"
        expected_auth = base64.b64encode(b"rzp_test_key:rzp_test_secret").decode()
        assert captured["auth"] == f"Basic {expected_auth}"
        assert captured["payload"] == {
            "amount": 50000,
            "currency": "INR",
            "receipt": "car-service-1",
            "notes": {"userId": "u1", "count": "2", "empty": ""},
        }

    async def test_gateway_rejection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"description": "amount invalid"}})

        with pytest.raises(PaymentGatewayError, match="Unable to create payment order"):
            await adapter_with(handler).create_order(100, "INR", "r")

    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(PaymentGatewayError):
            await adapter_with(handler).create_order(100, "INR", "r")
