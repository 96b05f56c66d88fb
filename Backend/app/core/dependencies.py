from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from beanie import PydanticObjectId

from app.core.exceptions import AuthenticationError, ForbiddenError
from app.core.security import decode_access_token
from app.models.user import User

# Bearer token scheme; missing headers are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> User:
    """
    Dependency to get the current authenticated user.
    
    Usage in routes:
        current_user: User = Depends(get_current_user)
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")
    
    # Decode token
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Not authorized, token failed")
    
    user_id = payload.get("sub")
    if not user_id or not PydanticObjectId.is_valid(user_id):
        raise AuthenticationError("Not authorized, token failed")
    
    user = await User.get(PydanticObjectId(user_id))
    if user is None:
        raise AuthenticationError("Not authorized, user not found")
    
    return user


async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency to ensure user has admin role.
    """
    if not current_user.is_admin:
        raise ForbiddenError("Not authorized as an admin")
    return current_user
