"""
Razorpay Orders API Adapter

Creates orders through the Razorpay REST API using HTTP basic auth with the
key id and key secret.

API Documentation: https://razorpay.com/docs/api/orders/
"""
import logging
import httpx
from typing import Dict, Any, Optional

from app.adapters.payment_gateway_interface import PaymentGatewayInterface
from app.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


class RazorpayAdapter(PaymentGatewayInterface):
    """Razorpay implementation of the payment gateway interface"""
    
    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_base: str = "https://api.razorpay.com/v1",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        # Custom transport is only used by tests
        self._transport = transport
    
    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": self._stringify_notes(notes or {})
        }
        
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                auth=(self.key_id, self.key_secret),
                transport=self._transport
            ) as client:
                response = await client.post(f"{self.api_base}/orders", json=payload)
                response.raise_for_status()
                order = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Razorpay rejected order creation: {e.response.status_code} {e.response.text}"
            )
            raise PaymentGatewayError("Unable to create payment order") from e
        except httpx.HTTPError as e:
            logger.error(f"Razorpay request failed: {e}")
            raise PaymentGatewayError("Unable to create payment order") from e
        
        logger.info(f"Created Razorpay order {order.get('id')} for {amount} {currency}")
        return order
    
    @staticmethod
    def _stringify_notes(notes: Dict[str, Any]) -> Dict[str, str]:
        """Razorpay only accepts string note values."""
        return {
            str(key): "" if value is None else str(value)
            for key, value in notes.items()
        }
