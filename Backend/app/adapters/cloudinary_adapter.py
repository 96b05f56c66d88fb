"""
Cloudinary Upload Adapter

Signed image uploads through the Cloudinary REST upload API.

API Documentation: https://cloudinary.com/documentation/image_upload_api_reference
"""
import logging
import time
import httpx
from typing import Optional

from cloudinary.utils import api_sign_request

logger = logging.getLogger(__name__)


class CloudinaryAdapter:
    """Uploads raw image bytes and returns the hosted secure URL"""
    
    UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
    
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self._transport = transport
    
    def sign(self, params: dict) -> str:
        """
        Cloudinary request signature: SHA-1 of the sorted key=value pairs
        joined with '&', followed by the API secret.
        """
        return api_sign_request(params, self.api_secret)
    
    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
        public_id: Optional[str] = None
    ) -> str:
        """
        Upload an image.

        Returns:
            The secure URL of the uploaded image

        Raises:
            httpx.HTTPError: If the upload request fails
        """
        params = {
            "folder": folder,
            "public_id": public_id,
            "timestamp": int(time.time()),
        }
        data = {key: str(value) for key, value in params.items() if value not in (None, "")}
        data["api_key"] = self.api_key
        data["signature"] = self.sign(params)
        
        url = self.UPLOAD_URL.format(cloud_name=self.cloud_name)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                url,
                data=data,
                files={"file": (filename, content, content_type)}
            )
            response.raise_for_status()
            result = response.json()
        
        logger.info(f"Uploaded image to Cloudinary as {result.get('public_id')}")
        return result["secure_url"]
