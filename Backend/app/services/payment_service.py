"""
Payment Service - Razorpay Order & Signature Verification

Handles the two halves of a gateway checkout:
- Order creation before the client opens the checkout widget
- Signature verification of the (orderId, paymentId) pair the client reports

The signature is the hex HMAC-SHA256 of "orderId|paymentId" keyed by the
gateway key secret. A mismatch is always rejected.
"""
import hashlib
import hmac
import logging
import time
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from functools import lru_cache
from typing import Any, Dict, Optional

from app.adapters.payment_gateway_interface import PaymentGatewayInterface
from app.adapters.razorpay_adapter import RazorpayAdapter
from app.core.config import settings
from app.core.exceptions import (
    ConfigurationError,
    PaymentGatewayError,
    PaymentVerificationError,
    ValidationError,
)
from app.models.service import PaymentDetails, PaymentStatus
from app.models.user import User
from app.schemas.service import PaymentDetailsSchema

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Payment gateway is not configured on the server"


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (500.00) to minor units (50000), rounding half up."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number")
    if not value.is_finite():
        raise ValidationError("Amount must be a number")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of "order_id|payment_id" keyed by the gateway secret."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """True only when the supplied signature matches the recomputed digest exactly."""
    if not (order_id and payment_id and signature and secret):
        return False
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


class PaymentService:
    """Service for gateway orders and payment verification"""
    
    def __init__(
        self,
        gateway: Optional[PaymentGatewayInterface],
        key_secret: str,
        default_currency: str = "INR"
    ):
        self.gateway = gateway
        self.key_secret = key_secret
        self.default_currency = default_currency
    
    async def create_order(
        self,
        amount,
        currency: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
        requester: Optional[User] = None
    ) -> Dict[str, Any]:
        """
        Create a gateway order for `amount` (major units).

        Raises:
            ValidationError: amount missing or not positive (no gateway call)
            ConfigurationError: gateway credentials absent
            PaymentGatewayError: gateway call failed
        """
        if amount is None:
            raise ValidationError("Amount is required to initiate payment")
        amount_minor = to_minor_units(amount)
        if amount_minor <= 0:
            raise ValidationError("Amount is required to initiate payment")
        
        if self.gateway is None:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        
        order_notes: Dict[str, Any] = {}
        if requester is not None:
            order_notes["userId"] = str(requester.id)
            order_notes["email"] = requester.email
        order_notes.update(notes or {})
        
        receipt = f"car-service-{int(time.time() * 1000)}"
        
        try:
            return await self.gateway.create_order(
                amount=amount_minor,
                currency=(currency or self.default_currency).upper(),
                receipt=receipt,
                notes=order_notes
            )
        except PaymentGatewayError:
            raise
        except Exception as e:
            logger.error(f"Create payment order error: {e}")
            raise PaymentGatewayError("Unable to create payment order") from e
    
    def verify_payment(
        self,
        order_id: Optional[str],
        payment_id: Optional[str],
        signature: Optional[str]
    ) -> None:
        """
        Verify a checkout result.

        Raises:
            ValidationError: any of the three values missing
            ConfigurationError: key secret absent
            PaymentVerificationError: signature mismatch
        """
        if not (order_id and payment_id and signature):
            raise ValidationError("Payment verification details are incomplete")
        
        if not self.key_secret:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        
        if not verify_signature(order_id, payment_id, signature, self.key_secret):
            logger.warning(f"Payment signature mismatch for order {order_id}")
            raise PaymentVerificationError("Payment verification failed")
    
    def resolve_payment_details(
        self,
        details: Optional[PaymentDetailsSchema],
        fallback_amount: float,
        fallback_currency: Optional[str] = None
    ) -> Optional[PaymentDetails]:
        """
        Turn client-supplied payment details into the stored record.

        With orderId, paymentId and signature all present the signature is
        verified and the record is stamped paid. Partial ids are rejected.
        Without ids the record is stored unverified and cannot claim paid.
        Returns None when no details were supplied.
        """
        if details is None:
            return None
        
        ids = (details.orderId, details.paymentId, details.signature)
        currency = (details.currency or fallback_currency or self.default_currency).upper()
        
        if all(ids):
            self.verify_payment(*ids)
            return PaymentDetails(
                status=PaymentStatus.PAID,
                order_id=details.orderId,
                payment_id=details.paymentId,
                signature=details.signature,
                amount=details.amount if details.amount else fallback_amount,
                currency=currency,
                paid_at=datetime.utcnow()
            )
        
        if any(ids):
            raise ValidationError("Payment verification details are incomplete")
        
        if details.status == PaymentStatus.PAID:
            raise PaymentVerificationError("Payment verification failed")
        
        return PaymentDetails(
            status=details.status or PaymentStatus.PENDING,
            amount=details.amount,
            currency=currency
        )


@lru_cache()
def get_payment_gateway() -> Optional[PaymentGatewayInterface]:
    """
    The process-wide gateway client, built once from settings.
    None when the Razorpay keys are not configured.
    """
    if not (settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET):
        logger.warning("Razorpay keys not configured; order creation is disabled")
        return None
    return RazorpayAdapter(
        key_id=settings.RAZORPAY_KEY_ID,
        key_secret=settings.RAZORPAY_KEY_SECRET,
        api_base=settings.RAZORPAY_API_BASE,
        timeout=settings.PAYMENT_GATEWAY_TIMEOUT
    )


def get_payment_service() -> PaymentService:
    """
    Factory function to create PaymentService around the shared gateway.
    """
    return PaymentService(
        gateway=get_payment_gateway(),
        key_secret=settings.RAZORPAY_KEY_SECRET,
        default_currency=settings.PAYMENT_CURRENCY
    )
