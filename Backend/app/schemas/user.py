from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


# ============================================================================
# Request Schemas
# ============================================================================

class UserRegisterSchema(BaseModel):
    """Registration payload"""
    name: str = Field(..., min_length=1, max_length=50, description="Display name")
    email: EmailStr = Field(..., description="Login email, unique")
    password: str = Field(..., min_length=6, description="Plain password, hashed before storage")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Asha Rao",
                "email": "asha@example.com",
                "password": "secret123"
            }
        }


class UserLoginSchema(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# ============================================================================
# Response Schemas
# ============================================================================

class UserSummarySchema(BaseModel):
    """Owner summary attached to cars"""
    id: str = Field(..., serialization_alias="_id")
    name: str
    email: str


class UserResponseSchema(UserSummarySchema):
    role: UserRole
    createdAt: Optional[datetime] = None


class AuthResponseSchema(UserResponseSchema):
    token: str
