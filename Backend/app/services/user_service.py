"""
User Service - registration, login and account lookups.
"""
import logging
from typing import List

from pymongo.errors import DuplicateKeyError

from app.core.exceptions import AuthenticationError, DuplicateError, NotFoundError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User, UserRole
from app.repositories.user_repository import UserRepository
from app.schemas.user import (
    AuthResponseSchema,
    UserLoginSchema,
    UserRegisterSchema,
    UserResponseSchema,
)

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts (Async)"""
    
    def __init__(self):
        self.repository = UserRepository()
    
    async def register(self, data: UserRegisterSchema) -> AuthResponseSchema:
        """
        Register a regular user. Admin accounts are only created through
        create_admin.
        """
        if await self.repository.get_by_email(data.email):
            raise DuplicateError("User already exists")
        
        try:
            user = await self.repository.create(
                name=data.name,
                email=data.email,
                hashed_password=hash_password(data.password),
                role=UserRole.USER
            )
        except DuplicateKeyError:
            raise DuplicateError("User already exists")
        
        return self._auth_response(user)
    
    async def login(self, data: UserLoginSchema) -> AuthResponseSchema:
        user = await self.repository.get_by_email(data.email)
        if not user or not verify_password(data.password, user.hashed_password):
            raise AuthenticationError("Invalid email or password")
        
        return self._auth_response(user)
    
    async def get_profile(self, user_id) -> UserResponseSchema:
        user = await self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user_to_response(user)
    
    async def list_users(self) -> List[UserResponseSchema]:
        users = await self.repository.list_all()
        return [user_to_response(user) for user in users]
    
    async def create_admin(self, name: str, email: str, password: str) -> User:
        """
        Create an admin account, or promote the existing account with this email.
        """
        user = await self.repository.get_by_email(email)
        if user:
            user.role = UserRole.ADMIN
            await user.save()
            logger.info(f"Promoted user {user.id} to admin")
            return user
        
        return await self.repository.create(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=UserRole.ADMIN
        )
    
    # ========================================================================
    # Private Helper Methods
    # ========================================================================
    
    def _auth_response(self, user: User) -> AuthResponseSchema:
        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        return AuthResponseSchema(
            **user_to_response(user).model_dump(),
            token=token
        )


def user_to_response(user: User) -> UserResponseSchema:
    """Convert database user to response schema (never includes the hash)."""
    return UserResponseSchema(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        createdAt=user.created_at
    )


def get_user_service() -> UserService:
    """
    Factory function to create UserService instance.
    """
    return UserService()
