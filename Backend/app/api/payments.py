"""
Payment API Routes (Razorpay)

- POST /create-order - Create a gateway order before checkout
- POST /verify - Verify the checkout signature
"""
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.common import success_response
from app.schemas.payment import CreateOrderSchema, VerifyPaymentSchema
from app.services.payment_service import PaymentService, get_payment_service

router = APIRouter()


@router.post(
    "/create-order",
    status_code=status.HTTP_201_CREATED,
    summary="Create payment order",
    description="Amount is in major units; the gateway order amount is in minor units (x100)."
)
async def create_order(
    data: CreateOrderSchema,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    order = await service.create_order(
        data.amount,
        currency=data.currency,
        notes=data.notes,
        requester=current_user
    )
    return success_response(data=order)


@router.post("/verify", summary="Verify payment signature")
async def verify_payment(
    data: VerifyPaymentSchema,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    service.verify_payment(data.orderId, data.paymentId, data.signature)
    return success_response(message="Payment verified successfully")
