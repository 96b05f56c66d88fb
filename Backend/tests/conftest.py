"""
Pytest configuration and fixtures.

MongoDB is replaced by mongomock-motor and the Razorpay gateway by a
recording fake, injected through FastAPI dependency overrides.
"""
import os
import tempfile

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="car-uploads-"))
os.environ["RAZORPAY_KEY_ID"] = ""
os.environ["RAZORPAY_KEY_SECRET"] = ""
os.environ["CLOUDINARY_CLOUD_NAME"] = ""

from typing import Any, AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from app.core.database import init_db
from app.main import app
from app.models.car import Car
from app.models.user import User, UserRole
from app.services.image_storage import ImageStorageService, get_image_storage
from app.services.payment_service import PaymentService, get_payment_service
from tests.helpers import RAZORPAY_TEST_SECRET, FakeGateway, make_user


@pytest.fixture(autouse=True)
async def database():
    """Fresh in-memory database for every test."""
    client = AsyncMongoMockClient()
    db = client["car_management_test"]
    await init_db(database=db)
    yield db


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def payment_service(gateway) -> PaymentService:
    return PaymentService(gateway=gateway, key_secret=RAZORPAY_TEST_SECRET)


@pytest.fixture
def image_storage(tmp_path) -> ImageStorageService:
    return ImageStorageService(upload_dir=str(tmp_path / "uploads"), max_bytes=1024)


@pytest.fixture
async def client(payment_service, image_storage) -> AsyncGenerator[AsyncClient, Any]:
    """HTTP client against the app with the fake gateway wired in."""
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def owner() -> User:
    return await make_user("Car Owner", "owner@example.com")


@pytest.fixture
async def other_user() -> User:
    return await make_user("Someone Else", "other@example.com")


@pytest.fixture
async def admin() -> User:
    return await make_user("Admin", "admin@example.com", UserRole.ADMIN)


@pytest.fixture
async def car(owner) -> Car:
    car = Car(
        brand="Honda",
        model="City",
        year=2020,
        price=950000,
        color="White",
        mileage=32000,
        owner=owner.id
    )
    await car.insert()
    return car
