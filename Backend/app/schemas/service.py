from pydantic import BaseModel, Field
from typing import Optional, List, Union, Dict
from datetime import datetime

from app.models.service import ServiceType, PaymentStatus


# ============================================================================
# Payment Details Schemas (matching frontend paymentDetails)
# ============================================================================

class PaymentDetailsSchema(BaseModel):
    """Payment details sent along with a booked service"""
    status: Optional[PaymentStatus] = Field(None, description="Requested status; only a verified signature yields 'paid'")
    orderId: Optional[str] = Field(None, description="Gateway order id")
    paymentId: Optional[str] = Field(None, description="Gateway payment id")
    signature: Optional[str] = Field(None, description="Gateway signature over orderId|paymentId")
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Amount paid, in major units")
    currency: Optional[str] = Field(None, max_length=3, description="ISO currency code")


class PaymentDetailsResponseSchema(BaseModel):
    status: PaymentStatus
    orderId: Optional[str] = None
    paymentId: Optional[str] = None
    signature: Optional[str] = None
    amount: Optional[float] = None
    currency: str = "INR"
    paidAt: Optional[datetime] = None


# ============================================================================
# Service Request Schemas
# ============================================================================

class ServiceCreateSchema(BaseModel):
    """Service record creation payload"""
    car: str = Field(..., description="Car ID")
    date: Optional[datetime] = Field(None, description="Service date, defaults to now")
    description: str = Field(..., min_length=1, max_length=500)
    cost: float = Field(..., ge=0, allow_inf_nan=False, description="Service cost, cannot be negative")
    serviceType: ServiceType = ServiceType.MAINTENANCE
    nextServiceDate: Optional[datetime] = None
    serviceProvider: Optional[str] = Field(None, max_length=100)
    paymentDetails: Optional[PaymentDetailsSchema] = None

    class Config:
        json_schema_extra = {
            "example": {
                "car": "665f1c2b9a1d4e0012a3b4c5",
                "date": "2024-06-01T10:00:00",
                "description": "Honda City - maintenance service",
                "cost": 500.0,
                "serviceType": "maintenance",
                "serviceProvider": "City Auto Service",
                "paymentDetails": {
                    "orderId": "order_Nabc123",
                    "paymentId": "pay_Nxyz789",
                    "signature": "<hex hmac>",
                    "amount": 500.0,
                    "currency": "INR"
                }
            }
        }


class ServiceUpdateSchema(BaseModel):
    """Partial update; the car reference cannot be changed"""
    date: Optional[datetime] = None
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    cost: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    serviceType: Optional[ServiceType] = None
    nextServiceDate: Optional[datetime] = None
    serviceProvider: Optional[str] = Field(None, max_length=100)
    paymentDetails: Optional[PaymentDetailsSchema] = None


# ============================================================================
# Service Response Schemas
# ============================================================================

class ServiceCarSummarySchema(BaseModel):
    """Car fields populated into a service"""
    id: str = Field(..., serialization_alias="_id")
    brand: str
    model: str
    year: int
    owner: Optional[str] = None


class ServiceResponseSchema(BaseModel):
    id: str = Field(..., serialization_alias="_id")
    car: Union[ServiceCarSummarySchema, str]
    date: datetime
    description: str
    cost: float
    serviceType: ServiceType
    nextServiceDate: Optional[datetime] = None
    serviceProvider: Optional[str] = None
    paymentDetails: PaymentDetailsResponseSchema
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ServiceTypeEstimateSchema(BaseModel):
    """Cost statistics for one service type on one car"""
    average: float
    minimum: float
    maximum: float
    count: int
    lastServiceDate: Optional[datetime] = None
    confidence: str


class ServiceEstimatesResponseSchema(BaseModel):
    car: str
    estimates: Dict[str, ServiceTypeEstimateSchema] = Field(default_factory=dict)
