"""
Image Storage Service

Stores uploaded car images, trying in order:
1. Cloudinary (when configured); a failed upload falls back to a data URI
2. Local disk under UPLOAD_DIR, served at /uploads (not when serverless)
3. Inline base64 data URI
"""
import base64
import logging
import random
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from app.adapters.cloudinary_adapter import CloudinaryAdapter
from app.core.config import settings
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CLOUD_FOLDER = "car-management/user-uploads"


def slugify(value: Optional[str]) -> str:
    """'Honda City ZX' -> 'honda-city-zx'; empty input gives 'car'."""
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "car").strip().lower())
    return slug.strip("-")


def to_data_uri(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


class ImageStorageService:
    """Validates and stores car images"""
    
    def __init__(
        self,
        cloud: Optional[CloudinaryAdapter] = None,
        upload_dir: Optional[str] = None,
        serverless: bool = False,
        max_bytes: int = 5 * 1024 * 1024,
        inline_warn_bytes: int = 1024 * 1024
    ):
        self.cloud = cloud
        self.upload_dir = Path(upload_dir) if upload_dir else None
        self.serverless = serverless
        self.max_bytes = max_bytes
        self.inline_warn_bytes = inline_warn_bytes
    
    async def store_upload(
        self,
        upload: Optional[UploadFile],
        brand: Optional[str] = None,
        model: Optional[str] = None
    ) -> Optional[str]:
        """
        Validate and store an uploaded image.
        Returns the stored image reference, or None when nothing was uploaded.
        """
        if upload is None or not upload.filename:
            return None
        
        # At most one byte past max_bytes
        content = await upload.read(self.max_bytes + 1)
        return await self.store(
            content,
            upload.content_type or "",
            upload.filename,
            brand=brand,
            model=model
        )
    
    async def store(
        self,
        content: bytes,
        content_type: str,
        filename: str,
        brand: Optional[str] = None,
        model: Optional[str] = None
    ) -> str:
        self._validate(content, content_type)
        
        if self.cloud is not None:
            public_id = f"{slugify(brand)}-{slugify(model)}" if (brand or model) else None
            try:
                return await self.cloud.upload(
                    content,
                    filename,
                    content_type,
                    folder=CLOUD_FOLDER,
                    public_id=public_id
                )
            except Exception as e:
                logger.error(f"Cloud upload failed, falling back to base64: {e}")
                return self._inline(content, content_type)
        
        if not self.serverless and self.upload_dir is not None:
            return self._write_to_disk(content, filename)
        
        return self._inline(content, content_type)
    
    def _validate(self, content: bytes, content_type: str) -> None:
        if not content_type.startswith("image/"):
            raise ValidationError("Only image files are allowed!")
        if len(content) > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise ValidationError(f"Image must be {limit_mb}MB or smaller")
    
    def _write_to_disk(self, content: bytes, filename: str) -> str:
        cars_dir = self.upload_dir / "cars"
        cars_dir.mkdir(parents=True, exist_ok=True)
        
        suffix = Path(filename).suffix.lower()
        unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        stored_name = f"car-{unique}{suffix}"
        (cars_dir / stored_name).write_bytes(content)
        return f"/uploads/cars/{stored_name}"
    
    def _inline(self, content: bytes, content_type: str) -> str:
        data_uri = to_data_uri(content, content_type)
        # Inline images count toward MongoDB's 16MB document limit
        if len(data_uri) > self.inline_warn_bytes:
            logger.warning(
                f"Storing {len(data_uri)} byte image inline as a data URI"
            )
        return data_uri


def get_image_storage() -> ImageStorageService:
    """
    Factory function building the storage chain from settings.
    """
    cloud = None
    if settings.CLOUDINARY_CLOUD_NAME:
        cloud = CloudinaryAdapter(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            timeout=settings.IMAGE_UPLOAD_TIMEOUT
        )
    return ImageStorageService(
        cloud=cloud,
        upload_dir=settings.UPLOAD_DIR,
        serverless=settings.SERVERLESS,
        max_bytes=settings.MAX_IMAGE_BYTES,
        inline_warn_bytes=settings.INLINE_IMAGE_WARN_BYTES
    )
