from typing import Optional, List, Dict, Any, Iterable
import logging
from beanie import PydanticObjectId
from beanie.operators import In

from app.models.service import Service

logger = logging.getLogger(__name__)


class ServiceRepository:
    """
    Repository for service record database operations (MongoDB/Beanie).
    Service.car is the only link between a car and its services.
    """
    
    async def get_by_id(self, service_id) -> Optional[Service]:
        """Get service by ID; malformed ids are treated as missing."""
        if not PydanticObjectId.is_valid(str(service_id)):
            return None
        return await Service.get(PydanticObjectId(str(service_id)))
    
    async def list_all(self) -> List[Service]:
        """All services, latest service date first."""
        return await Service.find_all().sort("-date").to_list()
    
    async def list_by_car(self, car_id: PydanticObjectId) -> List[Service]:
        """Services for a car, latest service date first."""
        return await Service.find(Service.car == car_id).sort("-date").to_list()
    
    async def group_by_car(self, car_ids: Iterable[PydanticObjectId]) -> Dict[str, List[Service]]:
        """Services for several cars in one query, keyed by string car id."""
        ids = list(car_ids)
        grouped: Dict[str, List[Service]] = {str(car_id): [] for car_id in ids}
        if not ids:
            return grouped
        
        services = await Service.find(In(Service.car, ids)).sort("-date").to_list()
        for service in services:
            grouped.setdefault(str(service.car), []).append(service)
        return grouped
    
    async def create(self, service: Service) -> Service:
        await service.insert()
        return service
    
    async def update(self, service: Service, changes: Dict[str, Any]) -> Service:
        """Apply field changes; the car reference is never moved."""
        changes.pop("car", None)
        for field, value in changes.items():
            setattr(service, field, value)
        await service.save()
        return service
    
    async def delete(self, service: Service) -> None:
        await service.delete()
    
    async def delete_by_car(self, car_id: PydanticObjectId) -> int:
        result = await Service.find(Service.car == car_id).delete()
        return result.deleted_count if result is not None else 0
