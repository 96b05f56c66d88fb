from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class PaymentGatewayInterface(ABC):
    """Abstract interface for hosted payment gateways (Razorpay etc.)"""

    @abstractmethod
    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Create a gateway order.

        Args:
            amount: Amount in the smallest currency unit (paise for INR)
            currency: ISO currency code
            receipt: Merchant receipt reference
            notes: Free-form key/value pairs stored with the order

        Returns:
            The gateway's order object
        """
        pass
