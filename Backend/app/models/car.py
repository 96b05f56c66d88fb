from beanie import Document, PydanticObjectId
from pydantic import Field
from datetime import datetime
from typing import Optional

class Car(Document):
    """
    Car model.
    Represents a car listed by its owner. Services point back at the car
    through Service.car; the car itself stores no list of service ids.
    """
    brand: str
    model: str
    year: int
    price: float = 0.0
    color: Optional[str] = None
    mileage: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None  # URL, /uploads path or data URI
    
    # Reference to the owning User; fixed at creation
    owner: PydanticObjectId
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    
    class Settings:
        name = "cars"
        indexes = [
            "owner",
        ]
    
    async def save(self, *args, **kwargs):
        self.updated_at = datetime.utcnow()
        await super().save(*args, **kwargs)
