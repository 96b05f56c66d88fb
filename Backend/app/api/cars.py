"""
Car API Routes

- GET / - All cars (public)
- GET /my-cars - Cars owned by the current user
- GET /{car_id} - One car (public)
- POST / - Create car (multipart, optional image)
- PUT /{car_id} - Update car (owner or admin)
- DELETE /{car_id} - Delete car and its services (owner or admin)
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.common import success_response
from app.services.car_service import CarService, get_car_service

router = APIRouter()


@router.get("", summary="List all cars")
async def list_cars(service: CarService = Depends(get_car_service)):
    cars = await service.list_cars()
    return success_response(data=cars, count=len(cars))


@router.get("/my-cars", summary="List current user's cars")
async def list_my_cars(
    current_user: User = Depends(get_current_user),
    service: CarService = Depends(get_car_service)
):
    cars = await service.list_user_cars(current_user)
    return success_response(data=cars, count=len(cars))


@router.get("/{car_id}", summary="Get car by ID")
async def get_car(car_id: str, service: CarService = Depends(get_car_service)):
    car = await service.get_car(car_id)
    return success_response(data=car)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create car",
    description="Multipart form. The image file is optional (images only, 5MB max)."
)
async def create_car(
    brand: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    year: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    mileage: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: CarService = Depends(get_car_service)
):
    fields = {
        "brand": brand,
        "model": model,
        "year": year,
        "price": price,
        "color": color,
        "mileage": mileage,
        "description": description,
        "image": image_url,
    }
    car = await service.create_car(fields, current_user, image=image)
    return success_response(data=car, message="Car created successfully")


@router.put("/{car_id}", summary="Update car")
async def update_car(
    car_id: str,
    brand: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    year: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    mileage: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: CarService = Depends(get_car_service)
):
    fields = {
        "brand": brand,
        "model": model,
        "year": year,
        "price": price,
        "color": color,
        "mileage": mileage,
        "description": description,
        "image": image_url,
    }
    car = await service.update_car(car_id, fields, current_user, image=image)
    return success_response(data=car, message="Car updated successfully")


@router.delete("/{car_id}", summary="Delete car")
async def delete_car(
    car_id: str,
    current_user: User = Depends(get_current_user),
    service: CarService = Depends(get_car_service)
):
    await service.delete_car(car_id, current_user)
    return success_response(message="Car deleted successfully")
