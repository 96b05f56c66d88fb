"""
Tests for the image storage chain (Cloudinary -> disk -> data URI).
"""
import base64
import io

import httpx
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.adapters.cloudinary_adapter import CloudinaryAdapter
from app.core.exceptions import ValidationError
from app.services.image_storage import ImageStorageService, slugify, to_data_uri

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x01" * 32


def cloud_with(handler) -> CloudinaryAdapter:
    return CloudinaryAdapter(
        cloud_name="demo",
        api_key="key",
        api_secret="shh",
        transport=httpx.MockTransport(handler)
    )


class TestHelpers:

    @pytest.mark.parametrize("value, expected", [
        ("Honda City", "honda-city"),
        ("  Mercedes-Benz  C-Class! ", "mercedes-benz-c-class"),
        (None, "car"),
        ("", "car"),
    ])
    def test_slugify(self, value, expected):
        assert slugify(value) == expected

    def test_data_uri(self):
        uri = to_data_uri(b"abc", "image/png")
        assert uri == "data:image/png;base64," + base64.b64encode(b"abc").decode()


class TestStorageChain:

    async def test_disk_storage(self, tmp_path):
        storage = ImageStorageService(upload_dir=str(tmp_path))

        stored = await storage.store(JPEG_BYTES, "image/jpeg", "photo.JPG")

        assert stored.startswith("/uploads/cars/car-")
        assert stored.endswith(".jpg")
        assert (tmp_path / "cars" / stored.rsplit("/", 1)[-1]).read_bytes() == JPEG_BYTES

    async def test_serverless_uses_data_uri(self, tmp_path):
        storage = ImageStorageService(upload_dir=str(tmp_path), serverless=True)

        stored = await storage.store(JPEG_BYTES, "image/jpeg", "photo.jpg")

        assert stored == to_data_uri(JPEG_BYTES, "image/jpeg")
        assert not (tmp_path / "cars").exists()

    async def test_cloud_upload(self, tmp_path):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json={
                "public_id": "car-management/user-uploads/honda-city",
                "secure_url": "https://res.cloudinary.com/demo/image/upload/honda-city.jpg",
            })

        storage = ImageStorageService(cloud=cloud_with(handler), upload_dir=str(tmp_path))

        stored = await storage.store(JPEG_BYTES, "image/jpeg", "photo.jpg", brand="Honda", model="City")

        assert stored == "https://res.cloudinary.com/demo/image/upload/honda-city.jpg"
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b"honda-city" in seen["body"]
        assert not (tmp_path / "cars").exists()

    async def test_cloud_failure_falls_back_to_data_uri(self, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="upstream error")

        storage = ImageStorageService(cloud=cloud_with(handler), upload_dir=str(tmp_path))

        stored = await storage.store(JPEG_BYTES, "image/jpeg", "photo.jpg")

        assert stored.startswith("data:image/jpeg;base64,")

    async def test_rejects_non_images(self, tmp_path):
        storage = ImageStorageService(upload_dir=str(tmp_path))
        with pytest.raises(ValidationError, match="Only image files"):
            await storage.store(b"%PDF-1.4", "application/pdf", "doc.pdf")

    async def test_rejects_oversized_images(self, tmp_path):
        storage = ImageStorageService(upload_dir=str(tmp_path), max_bytes=10)
        with pytest.raises(ValidationError):
            await storage.store(JPEG_BYTES, "image/jpeg", "photo.jpg")

    async def test_upload_read_stops_past_the_limit(self, tmp_path):
        source = io.BytesIO(JPEG_BYTES * 100)
        upload = UploadFile(
            file=source,
            filename="big.jpg",
            headers=Headers({"content-type": "image/jpeg"})
        )
        storage = ImageStorageService(upload_dir=str(tmp_path), max_bytes=10)

        with pytest.raises(ValidationError):
            await storage.store_upload(upload)

        assert source.tell() == 11

    async def test_no_upload_means_no_image(self, tmp_path):
        storage = ImageStorageService(upload_dir=str(tmp_path))
        assert await storage.store_upload(None) is None


class TestCloudinarySignature:

    def test_signature_ignores_empty_params_and_sorts_keys(self):
        adapter = CloudinaryAdapter(cloud_name="demo", api_key="key", api_secret="abcd")

        signature = adapter.sign({"timestamp": 1315060510, "public_id": "sample", "folder": None})

        # sha1("public_id=sample&timestamp=1315060510abcd")
        assert signature == "c3470533147774275dd37996cc4d0e68fd03cd4f"
