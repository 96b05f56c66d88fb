from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class CreateOrderSchema(BaseModel):
    """Order creation request; amount is in major units (e.g. rupees)"""
    amount: Optional[float] = Field(None, allow_inf_nan=False, description="Amount to charge, in major units")
    currency: str = Field("INR", min_length=3, max_length=3)
    notes: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 500.0,
                "currency": "INR",
                "notes": {"carId": "665f1c2b9a1d4e0012a3b4c5", "serviceType": "maintenance"}
            }
        }


class VerifyPaymentSchema(BaseModel):
    """Checkout result reported by the client"""
    orderId: Optional[str] = None
    paymentId: Optional[str] = None
    signature: Optional[str] = None
