"""
Database models package.
Import all models here so init_beanie can register them.
"""
from app.models.user import User, UserRole
from app.models.car import Car
from app.models.service import Service, ServiceType, PaymentDetails, PaymentStatus

__all__ = [
    "User",
    "UserRole",
    "Car",
    "Service",
    "ServiceType",
    "PaymentDetails",
    "PaymentStatus",
]
