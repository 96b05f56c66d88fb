"""
Service Record Service - Business Logic Layer

Maintenance/service history for cars. Coordinates:
- Ownership guard (car owner or admin for every mutation)
- Payment Service (inline signature verification for booked services)
- Service and Car repositories
"""
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import NotFoundError, ValidationError
from app.models.car import Car
from app.models.service import PaymentDetails, Service, ServiceType
from app.models.user import User
from app.repositories.car_repository import CarRepository
from app.repositories.service_repository import ServiceRepository
from app.schemas.common import format_validation_errors
from app.schemas.service import (
    PaymentDetailsResponseSchema,
    ServiceCarSummarySchema,
    ServiceCreateSchema,
    ServiceEstimatesResponseSchema,
    ServiceResponseSchema,
    ServiceTypeEstimateSchema,
    ServiceUpdateSchema,
)
from app.services.authorization import ensure_can_modify
from app.services.payment_service import PaymentService, get_payment_service

logger = logging.getLogger(__name__)

# API field name -> document field name
UPDATABLE_FIELDS = {
    "date": "date",
    "description": "description",
    "cost": "cost",
    "serviceType": "service_type",
    "nextServiceDate": "next_service_date",
    "serviceProvider": "service_provider",
}

# Required on the document; an explicit null leaves them unchanged
REQUIRED_FIELDS = {"date", "description", "cost", "serviceType"}


class ServiceRecordService:
    """Service for car service records (Async)"""
    
    def __init__(self, payment_service: PaymentService):
        self.payment_service = payment_service
        self.repository = ServiceRepository()
        self.car_repository = CarRepository(self.repository)
    
    async def list_all_services(self) -> List[ServiceResponseSchema]:
        """All services, latest first, each with its car and the car's owner."""
        services = await self.repository.list_all()
        cars: Dict[str, Optional[Car]] = {}
        for service in services:
            key = str(service.car)
            if key not in cars:
                cars[key] = await self.car_repository.get_by_id(service.car)
        
        return [
            service_to_response(service, cars.get(str(service.car)), include_owner=True)
            for service in services
        ]
    
    async def list_car_services(self, car_id: str) -> List[ServiceResponseSchema]:
        car = await self._get_car(car_id)
        services = await self.repository.list_by_car(car.id)
        return [service_to_response(service, car) for service in services]
    
    async def create_service(
        self,
        data: ServiceCreateSchema,
        requester: User
    ) -> ServiceResponseSchema:
        """
        Create a service record for a car the requester owns (or any car for admins).
        Payment details carrying gateway ids are verified before anything is stored.
        """
        car = await self._get_car(data.car)
        ensure_can_modify(requester, car.owner, "add service to this car")
        
        payment_details = self.payment_service.resolve_payment_details(
            data.paymentDetails,
            fallback_amount=data.cost
        )
        
        service = Service(
            car=car.id,
            date=data.date or datetime.utcnow(),
            description=data.description.strip(),
            cost=float(data.cost),
            service_type=data.serviceType,
            next_service_date=data.nextServiceDate,
            service_provider=data.serviceProvider,
            payment_details=payment_details or PaymentDetails()
        )
        await self.repository.create(service)
        logger.info(
            f"Service {service.id} added to car {car.id} "
            f"(payment {service.payment_details.status.value})"
        )
        
        return service_to_response(service, car)
    
    async def update_service(
        self,
        service_id: str,
        payload: Dict[str, Any],
        requester: User
    ) -> ServiceResponseSchema:
        """
        Update a service record. The ownership check runs before the payload
        is validated, so non-owners are refused whatever they send.
        """
        service = await self._get_service(service_id)
        car = await self.car_repository.get_by_id(service.car)
        ensure_can_modify(requester, car.owner if car else None, "update this service")
        
        try:
            data = ServiceUpdateSchema.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_errors(e.errors()))
        
        submitted = data.model_dump(exclude_unset=True)
        changes = {
            UPDATABLE_FIELDS[field]: value
            for field, value in submitted.items()
            if field in UPDATABLE_FIELDS
            and not (value is None and field in REQUIRED_FIELDS)
        }
        
        if data.paymentDetails is not None:
            payment_details = self.payment_service.resolve_payment_details(
                data.paymentDetails,
                fallback_amount=changes.get("cost", service.cost),
                fallback_currency=service.payment_details.currency
            )
            changes["payment_details"] = payment_details
        
        await self.repository.update(service, changes)
        return service_to_response(service, car)
    
    async def delete_service(self, service_id: str, requester: User) -> None:
        service = await self._get_service(service_id)
        car = await self.car_repository.get_by_id(service.car)
        ensure_can_modify(requester, car.owner if car else None, "delete this service")
        
        await self.repository.delete(service)
        logger.info(f"Deleted service {service.id} from car {service.car}")
    
    async def estimate_costs(self, car_id: str) -> ServiceEstimatesResponseSchema:
        """Per service type cost statistics from the car's history."""
        car = await self._get_car(car_id)
        services = await self.repository.list_by_car(car.id)
        return ServiceEstimatesResponseSchema(
            car=str(car.id),
            estimates=summarize_costs(services)
        )
    
    # ========================================================================
    # Private Helper Methods
    # ========================================================================
    
    async def _get_car(self, car_id) -> Car:
        car = await self.car_repository.get_by_id(car_id)
        if not car:
            raise NotFoundError("Car not found")
        return car
    
    async def _get_service(self, service_id) -> Service:
        service = await self.repository.get_by_id(service_id)
        if not service:
            raise NotFoundError("Service not found")
        return service


def confidence_level(count: int) -> str:
    """How much weight an estimate built from `count` records deserves."""
    if count >= 5:
        return "High"
    if count >= 3:
        return "Medium"
    return "Low"


def summarize_costs(services: List[Service]) -> Dict[str, ServiceTypeEstimateSchema]:
    """
    Group services by type and compute average/min/max cost.
    Types with no history are left out.
    """
    estimates: Dict[str, ServiceTypeEstimateSchema] = {}
    for service_type in ServiceType:
        typed = [s for s in services if s.service_type == service_type]
        if not typed:
            continue
        
        costs = [Decimal(str(s.cost or 0)) for s in typed]
        average = (sum(costs) / len(costs)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        latest = max(typed, key=lambda s: s.date)
        
        estimates[service_type.value] = ServiceTypeEstimateSchema(
            average=float(average),
            minimum=float(min(costs)),
            maximum=float(max(costs)),
            count=len(typed),
            lastServiceDate=latest.date,
            confidence=confidence_level(len(typed))
        )
    return estimates


def service_to_response(
    service: Service,
    car: Optional[Car] = None,
    include_owner: bool = False
) -> ServiceResponseSchema:
    """Convert database service to response schema, populating the car summary when given."""
    if car is not None:
        car_ref = ServiceCarSummarySchema(
            id=str(car.id),
            brand=car.brand,
            model=car.model,
            year=car.year,
            owner=str(car.owner) if include_owner else None
        )
    else:
        car_ref = str(service.car)
    
    payment = service.payment_details or PaymentDetails()
    return ServiceResponseSchema(
        id=str(service.id),
        car=car_ref,
        date=service.date,
        description=service.description,
        cost=service.cost,
        serviceType=service.service_type,
        nextServiceDate=service.next_service_date,
        serviceProvider=service.service_provider,
        paymentDetails=PaymentDetailsResponseSchema(
            status=payment.status,
            orderId=payment.order_id,
            paymentId=payment.payment_id,
            signature=payment.signature,
            amount=payment.amount,
            currency=payment.currency,
            paidAt=payment.paid_at
        ),
        createdAt=service.created_at,
        updatedAt=service.updated_at
    )


def get_service_record_service(
    payment_service: PaymentService = Depends(get_payment_service)
) -> ServiceRecordService:
    """
    Factory dependency to create ServiceRecordService with the shared payment service.
    """
    return ServiceRecordService(payment_service)
