"""
Tests for /api/cars endpoints.
"""
from datetime import datetime
from pathlib import Path

from beanie import PydanticObjectId

from app.models.car import Car
from app.models.service import Service
from tests.helpers import auth_headers

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

CAR_FORM = {
    "brand": "Maruti",
    "model": "Swift",
    "year": "2019",
    "price": "550000",
    "color": "Red",
    "mileage": "41000",
    "description": "Single owner, serviced on time",
}


class TestReadCars:

    async def test_public_listing_populates_owner_and_services(self, client, car, owner):
        await Service(car=car.id, description="Oil change", cost=1200).insert()

        response = await client.get("/api/cars")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 1
        listed = body["data"][0]
        assert listed["_id"] == str(car.id)
        assert listed["owner"] == {"_id": str(owner.id), "name": "Car Owner", "email": "owner@example.com"}
        assert len(listed["services"]) == 1
        assert listed["services"][0]["car"] == str(car.id)

    async def test_get_car(self, client, car):
        response = await client.get(f"/api/cars/{car.id}")
        assert response.status_code == 200
        assert response.json()["data"]["brand"] == "Honda"

    async def test_get_unknown_or_malformed_id(self, client):
        missing = await client.get(f"/api/cars/{PydanticObjectId()}")
        malformed = await client.get("/api/cars/not-an-object-id")

        assert missing.status_code == 404
        assert malformed.status_code == 404
        assert missing.json() == {"success": False, "message": "Car not found"}

    async def test_my_cars_only_lists_own(self, client, car, owner, other_user):
        await Car(brand="Tata", model="Nexon", year=2022, owner=other_user.id).insert()

        response = await client.get("/api/cars/my-cars", headers=auth_headers(owner))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["_id"] == str(car.id)

    async def test_my_cars_requires_token(self, client):
        response = await client.get("/api/cars/my-cars")
        assert response.status_code == 401

    async def test_invalid_token(self, client):
        response = await client.get("/api/cars/my-cars", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["success"] is False


class TestCreateCar:

    async def test_create_with_image_upload(self, client, owner, image_storage):
        response = await client.post(
            "/api/cars",
            data=CAR_FORM,
            files={"image": ("swift.png", PNG_BYTES, "image/png")},
            headers=auth_headers(owner)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["owner"]["_id"] == str(owner.id)
        assert data["year"] == 2019
        assert data["mileage"] == 41000
        assert data["services"] == []
        assert data["image"].startswith("/uploads/cars/car-")
        assert data["image"].endswith(".png")

        stored_name = data["image"].rsplit("/", 1)[-1]
        assert (Path(image_storage.upload_dir) / "cars" / stored_name).read_bytes() == PNG_BYTES

    async def test_create_without_image(self, client, owner):
        response = await client.post("/api/cars", data=CAR_FORM, headers=auth_headers(owner))

        assert response.status_code == 201
        assert response.json()["data"]["image"] is None

    async def test_non_image_upload_rejected(self, client, owner):
        response = await client.post(
            "/api/cars",
            data=CAR_FORM,
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(owner)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Only image files are allowed!"
        assert await Car.find_all().count() == 0

    async def test_oversized_image_rejected(self, client, owner, image_storage):
        too_big = b"\x00" * (image_storage.max_bytes + 1)
        response = await client.post(
            "/api/cars",
            data=CAR_FORM,
            files={"image": ("big.png", too_big, "image/png")},
            headers=auth_headers(owner)
        )
        assert response.status_code == 400

    async def test_missing_required_fields(self, client, owner):
        response = await client.post(
            "/api/cars",
            data={"brand": "Maruti"},
            headers=auth_headers(owner)
        )

        assert response.status_code == 400
        assert "model" in response.json()["message"]

    async def test_year_after_next_rejected(self, client, owner):
        too_new = str(datetime.utcnow().year + 2)
        response = await client.post(
            "/api/cars",
            data={**CAR_FORM, "year": too_new},
            headers=auth_headers(owner)
        )

        assert response.status_code == 400
        assert "year" in response.json()["message"]
        assert await Car.find_all().count() == 0

    async def test_next_year_model_accepted(self, client, owner):
        next_year = datetime.utcnow().year + 1
        response = await client.post(
            "/api/cars",
            data={**CAR_FORM, "year": str(next_year)},
            headers=auth_headers(owner)
        )

        assert response.status_code == 201
        assert response.json()["data"]["year"] == next_year

    async def test_requires_token(self, client):
        response = await client.post("/api/cars", data=CAR_FORM)
        assert response.status_code == 401


class TestUpdateCar:

    async def test_owner_update(self, client, car, owner):
        response = await client.put(
            f"/api/cars/{car.id}",
            data={"price": "900000", "color": "Silver"},
            headers=auth_headers(owner)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["price"] == 900000
        assert data["color"] == "Silver"
        assert data["brand"] == "Honda"
        assert data["owner"]["_id"] == str(owner.id)

    async def test_admin_update_keeps_owner(self, client, car, owner, admin):
        response = await client.put(
            f"/api/cars/{car.id}",
            data={"mileage": "35000"},
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        refreshed = await Car.get(car.id)
        assert refreshed.mileage == 35000
        assert refreshed.owner == owner.id

    async def test_non_owner_forbidden_even_with_invalid_form(self, client, car, other_user):
        response = await client.put(
            f"/api/cars/{car.id}",
            data={"year": "not-a-year", "price": "-1"},
            headers=auth_headers(other_user)
        )

        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Not authorized to update this car"}

    async def test_owner_invalid_form(self, client, car, owner):
        response = await client.put(
            f"/api/cars/{car.id}",
            data={"price": "-1"},
            headers=auth_headers(owner)
        )
        assert response.status_code == 400

    async def test_owner_cannot_set_future_year(self, client, car, owner):
        response = await client.put(
            f"/api/cars/{car.id}",
            data={"year": "3000"},
            headers=auth_headers(owner)
        )

        assert response.status_code == 400
        refreshed = await Car.get(car.id)
        assert refreshed.year == 2020

    async def test_unknown_car(self, client, owner):
        response = await client.put(
            f"/api/cars/{PydanticObjectId()}",
            data={"price": "1"},
            headers=auth_headers(owner)
        )
        assert response.status_code == 404


class TestDeleteCar:

    async def test_delete_cascades_to_services(self, client, car, owner):
        await Service(car=car.id, description="Oil change", cost=1200).insert()
        await Service(car=car.id, description="Wash", cost=300, service_type="detailing").insert()

        response = await client.delete(f"/api/cars/{car.id}", headers=auth_headers(owner))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Car deleted successfully"}
        assert await Car.get(car.id) is None
        assert await Service.find(Service.car == car.id).count() == 0

    async def test_non_owner_forbidden(self, client, car, other_user):
        response = await client.delete(f"/api/cars/{car.id}", headers=auth_headers(other_user))

        assert response.status_code == 403
        assert await Car.get(car.id) is not None

    async def test_admin_may_delete(self, client, car, admin):
        response = await client.delete(f"/api/cars/{car.id}", headers=auth_headers(admin))
        assert response.status_code == 200
