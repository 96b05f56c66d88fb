from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime

from app.schemas.user import UserSummarySchema
from app.schemas.service import ServiceResponseSchema


def check_model_year(year: Optional[int]) -> Optional[int]:
    """Model years run from 1886 up to next year's models."""
    latest = datetime.utcnow().year + 1
    if year is not None and year > latest:
        raise ValueError(f"Year cannot be later than {latest}")
    return year


# ============================================================================
# Car Request Schemas (built from the multipart form fields)
# ============================================================================

class CarCreateSchema(BaseModel):
    """Car creation data; the owner always comes from the authenticated user"""
    brand: str = Field(..., min_length=1, max_length=50)
    model: str = Field(..., min_length=1, max_length=50)
    year: int = Field(..., ge=1886, description="Model year")
    price: float = Field(0.0, ge=0, allow_inf_nan=False)
    color: Optional[str] = Field(None, max_length=30)
    mileage: Optional[int] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=1000)
    image: Optional[str] = Field(None, description="Image URL when no file is uploaded")

    _check_year = field_validator("year")(check_model_year)


class CarUpdateSchema(BaseModel):
    """Partial update; owner is never accepted"""
    brand: Optional[str] = Field(None, min_length=1, max_length=50)
    model: Optional[str] = Field(None, min_length=1, max_length=50)
    year: Optional[int] = Field(None, ge=1886)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    color: Optional[str] = Field(None, max_length=30)
    mileage: Optional[int] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=1000)
    image: Optional[str] = None

    _check_year = field_validator("year")(check_model_year)


# ============================================================================
# Car Response Schemas
# ============================================================================

class CarResponseSchema(BaseModel):
    id: str = Field(..., serialization_alias="_id")
    brand: str
    model: str
    year: int
    price: float
    color: Optional[str] = None
    mileage: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None
    owner: Union[UserSummarySchema, str]
    services: List[ServiceResponseSchema] = Field(default_factory=list)
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
