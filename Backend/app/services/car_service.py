"""
Car Service - Business Logic Layer

CRUD for cars with owner and service-history population. Every mutation is
checked by the ownership guard; uploaded images go through ImageStorageService.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends, UploadFile
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.core.exceptions import NotFoundError, ValidationError
from app.models.car import Car
from app.models.service import Service
from app.models.user import User
from app.repositories.car_repository import CarRepository
from app.repositories.service_repository import ServiceRepository
from app.repositories.user_repository import UserRepository
from app.schemas.car import CarCreateSchema, CarResponseSchema, CarUpdateSchema
from app.schemas.common import format_validation_errors
from app.schemas.user import UserSummarySchema
from app.services.authorization import ensure_can_modify
from app.services.image_storage import ImageStorageService, get_image_storage
from app.services.service_record_service import service_to_response

logger = logging.getLogger(__name__)


def parse_form(schema: type, fields: Dict[str, Any]) -> BaseModel:
    """
    Validate raw multipart form values against a schema.
    Blank values count as not submitted.
    """
    submitted = {
        key: value for key, value in fields.items()
        if value is not None and not (isinstance(value, str) and value.strip() == "")
    }
    try:
        return schema.model_validate(submitted)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e.errors()))


class CarService:
    """Service for car business logic (Async)"""
    
    def __init__(self, image_storage: ImageStorageService):
        self.image_storage = image_storage
        self.service_repository = ServiceRepository()
        self.repository = CarRepository(self.service_repository)
        self.user_repository = UserRepository()
    
    async def list_cars(self) -> List[CarResponseSchema]:
        cars = await self.repository.list_all()
        return await self._populate(cars)
    
    async def list_user_cars(self, user: User) -> List[CarResponseSchema]:
        cars = await self.repository.list_by_owner(user.id)
        return await self._populate(cars)
    
    async def get_car(self, car_id: str) -> CarResponseSchema:
        car = await self._get_car(car_id)
        return (await self._populate([car]))[0]
    
    async def create_car(
        self,
        fields: Dict[str, Any],
        requester: User,
        image: Optional[UploadFile] = None
    ) -> CarResponseSchema:
        """Create a car owned by the requester."""
        data = parse_form(CarCreateSchema, fields)
        
        values = data.model_dump()
        stored_image = await self.image_storage.store_upload(image, brand=data.brand, model=data.model)
        if stored_image:
            values["image"] = stored_image
        
        car = await self.repository.create(values, owner_id=requester.id)
        logger.info(f"Car {car.id} created by user {requester.id}")
        return (await self._populate([car]))[0]
    
    async def update_car(
        self,
        car_id: str,
        fields: Dict[str, Any],
        requester: User,
        image: Optional[UploadFile] = None
    ) -> CarResponseSchema:
        """
        Update a car. The ownership check runs before the form is validated,
        so non-owners are refused whatever they send. Owner never changes.
        """
        car = await self._get_car(car_id)
        ensure_can_modify(requester, car.owner, "update this car")
        
        data = parse_form(CarUpdateSchema, fields)
        changes = data.model_dump(exclude_unset=True)
        
        stored_image = await self.image_storage.store_upload(
            image,
            brand=data.brand or car.brand,
            model=data.model or car.model
        )
        if stored_image:
            changes["image"] = stored_image
        
        await self.repository.update(car, changes)
        return (await self._populate([car]))[0]
    
    async def delete_car(self, car_id: str, requester: User) -> None:
        car = await self._get_car(car_id)
        ensure_can_modify(requester, car.owner, "delete this car")
        await self.repository.delete(car)
    
    # ========================================================================
    # Private Helper Methods
    # ========================================================================
    
    async def _get_car(self, car_id) -> Car:
        car = await self.repository.get_by_id(car_id)
        if not car:
            raise NotFoundError("Car not found")
        return car
    
    async def _populate(self, cars: List[Car]) -> List[CarResponseSchema]:
        """Attach owner summaries and service history to cars."""
        owners = await self.user_repository.get_many(car.owner for car in cars)
        services = await self.service_repository.group_by_car(car.id for car in cars)
        
        return [
            car_to_response(car, owners.get(str(car.owner)), services.get(str(car.id), []))
            for car in cars
        ]


def car_to_response(
    car: Car,
    owner: Optional[User] = None,
    services: Optional[List[Service]] = None
) -> CarResponseSchema:
    """Convert database car to response schema."""
    if owner is not None:
        owner_ref = UserSummarySchema(id=str(owner.id), name=owner.name, email=owner.email)
    else:
        owner_ref = str(car.owner)
    
    return CarResponseSchema(
        id=str(car.id),
        brand=car.brand,
        model=car.model,
        year=car.year,
        price=car.price,
        color=car.color,
        mileage=car.mileage,
        description=car.description,
        image=car.image,
        owner=owner_ref,
        services=[service_to_response(service) for service in (services or [])],
        createdAt=car.created_at,
        updatedAt=car.updated_at
    )


def get_car_service(
    image_storage: ImageStorageService = Depends(get_image_storage)
) -> CarService:
    """
    Factory dependency to create CarService instance.
    """
    return CarService(image_storage)
