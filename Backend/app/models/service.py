from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
import enum
import pymongo


class ServiceType(str, enum.Enum):
    """Service type enumeration."""
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    INSPECTION = "inspection"
    DETAILING = "detailing"
    OTHER = "other"


class PaymentStatus(str, enum.Enum):
    """Payment status enumeration."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentDetails(BaseModel):
    """
    Payment record embedded in a Service.
    Only a verified gateway signature moves status to PAID.
    """
    status: PaymentStatus = PaymentStatus.PENDING
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    signature: Optional[str] = None
    amount: Optional[float] = None
    currency: str = "INR"
    paid_at: Optional[datetime] = None


class Service(Document):
    """
    Service model.
    One maintenance/service history entry for a car.
    """
    car: PydanticObjectId
    date: datetime = Field(default_factory=datetime.utcnow)
    description: str
    cost: float
    service_type: ServiceType = ServiceType.MAINTENANCE
    next_service_date: Optional[datetime] = None
    service_provider: Optional[str] = None
    
    payment_details: PaymentDetails = Field(default_factory=PaymentDetails)
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    
    class Settings:
        name = "services"
        indexes = [
            [("car", pymongo.ASCENDING), ("date", pymongo.DESCENDING)],
        ]
    
    async def save(self, *args, **kwargs):
        self.updated_at = datetime.utcnow()
        await super().save(*args, **kwargs)
