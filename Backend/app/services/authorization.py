"""
Ownership Guard

A car and its service records may be changed only by the car's owner or by
an admin. Every mutation in the car and service-record services goes through
ensure_can_modify.
"""
from app.core.exceptions import ForbiddenError
from app.models.user import User


def can_modify(requester: User, owner_id) -> bool:
    """True when the requester owns the resource or is an admin."""
    if requester is None:
        return False
    if requester.is_admin:
        return True
    return owner_id is not None and str(requester.id) == str(owner_id)


def ensure_can_modify(requester: User, owner_id, action: str) -> None:
    """
    Raise ForbiddenError unless can_modify allows the requester.

    Args:
        requester: Authenticated user
        owner_id: Owner id of the car the resource belongs to
        action: Used in the error message, e.g. "update this car"
    """
    if not can_modify(requester, owner_id):
        raise ForbiddenError(f"Not authorized to {action}")
