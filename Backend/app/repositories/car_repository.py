from typing import Optional, List, Dict, Any
import logging
from beanie import PydanticObjectId

from app.models.car import Car
from app.repositories.service_repository import ServiceRepository

logger = logging.getLogger(__name__)


class CarRepository:
    """
    Repository for car database operations (MongoDB/Beanie).
    """
    
    def __init__(self, service_repository: Optional[ServiceRepository] = None):
        self.service_repository = service_repository or ServiceRepository()
    
    async def get_by_id(self, car_id) -> Optional[Car]:
        """Get car by ID; malformed ids are treated as missing."""
        if not PydanticObjectId.is_valid(str(car_id)):
            return None
        return await Car.get(PydanticObjectId(str(car_id)))
    
    async def list_all(self) -> List[Car]:
        """All cars, newest first."""
        return await Car.find_all().sort("-created_at").to_list()
    
    async def list_by_owner(self, owner_id: PydanticObjectId) -> List[Car]:
        """Cars owned by a user, newest first."""
        return await Car.find(Car.owner == owner_id).sort("-created_at").to_list()
    
    async def create(self, data: Dict[str, Any], owner_id: PydanticObjectId) -> Car:
        car = Car(**data, owner=owner_id)
        await car.insert()
        return car
    
    async def update(self, car: Car, changes: Dict[str, Any]) -> Car:
        """Apply field changes; the owner reference is never touched."""
        changes.pop("owner", None)
        for field, value in changes.items():
            setattr(car, field, value)
        await car.save()
        return car
    
    async def delete(self, car: Car) -> int:
        """
        Delete a car and its services.
        Services go first so no service is ever left pointing at a missing car.
        """
        removed = await self.service_repository.delete_by_car(car.id)
        await car.delete()
        logger.info(f"Deleted car {car.id} and {removed} service record(s)")
        return removed
