"""
Service Record API Routes

- GET / - All services (admin)
- POST / - Add a service to a car (owner or admin), verifying payment if supplied
- GET /{car_id} - Service history for a car
- GET /{car_id}/estimates - Cost statistics per service type for a car
- PUT /{service_id} - Update a service (owner or admin)
- DELETE /{service_id} - Delete a service (owner or admin)
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from app.core.dependencies import get_current_user, require_admin
from app.models.user import User
from app.schemas.common import success_response
from app.schemas.service import ServiceCreateSchema
from app.services.service_record_service import (
    ServiceRecordService,
    get_service_record_service,
)

router = APIRouter()


@router.get("", summary="List all services (admin)")
async def list_all_services(
    admin: User = Depends(require_admin),
    service: ServiceRecordService = Depends(get_service_record_service)
):
    services = await service.list_all_services()
    return success_response(data=services, count=len(services))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add service to a car",
    description="When paymentDetails carries orderId, paymentId and signature the payment is verified and stored as paid."
)
async def create_service(
    data: ServiceCreateSchema,
    current_user: User = Depends(get_current_user),
    service: ServiceRecordService = Depends(get_service_record_service)
):
    created = await service.create_service(data, current_user)
    return success_response(data=created, message="Service added successfully")


@router.get("/{car_id}/estimates", summary="Cost estimates for a car")
async def get_service_estimates(
    car_id: str,
    current_user: User = Depends(get_current_user),
    service: ServiceRecordService = Depends(get_service_record_service)
):
    estimates = await service.estimate_costs(car_id)
    return success_response(data=estimates)


@router.get("/{car_id}", summary="Service history for a car")
async def get_car_services(
    car_id: str,
    current_user: User = Depends(get_current_user),
    service: ServiceRecordService = Depends(get_service_record_service)
):
    services = await service.list_car_services(car_id)
    return success_response(data=services, count=len(services))


@router.put("/{service_id}", summary="Update service")
async def update_service(
    service_id: str,
    payload: Dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    service: ServiceRecordService = Depends(get_service_record_service)
):
    updated = await service.update_service(service_id, payload, current_user)
    return success_response(data=updated, message="Service updated successfully")


@router.delete("/{service_id}", summary="Delete service")
async def delete_service(
    service_id: str,
    current_user: User = Depends(get_current_user),
    service: ServiceRecordService = Depends(get_service_record_service)
):
    await service.delete_service(service_id, current_user)
    return success_response(message="Service deleted successfully")
