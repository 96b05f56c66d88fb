"""
API Router

Aggregates all /api routes.
"""
from fastapi import APIRouter
from app.api import users, cars, services, payments

# Create main api router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"]
)

api_router.include_router(
    cars.router,
    prefix="/cars",
    tags=["Cars"]
)

api_router.include_router(
    services.router,
    prefix="/services",
    tags=["Services - Maintenance History"]
)

api_router.include_router(
    payments.router,
    prefix="/payments",
    tags=["Payments - Razorpay"]
)
