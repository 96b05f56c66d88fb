"""
Shared test helpers.
"""
from typing import Any, Dict, List, Optional

from app.core.security import create_access_token, hash_password
from app.models.user import User, UserRole
from app.services.payment_service import compute_signature

RAZORPAY_TEST_SECRET = "rzp_test_secret_key"


class FakeGateway:
    """Records order requests instead of calling Razorpay"""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        self.calls.append(
            {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes}
        )
        return {
            "id": f"order_test{len(self.calls)}",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
            "status": "created",
        }


def sign(order_id: str, payment_id: str, secret: str = RAZORPAY_TEST_SECRET) -> str:
    return compute_signature(order_id, payment_id, secret)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


async def make_user(name: str, email: str, role: UserRole = UserRole.USER) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("password123"),
        role=role
    )
    await user.insert()
    return user
