# backend/services/cloudinary_service.py
"""
Cloudinary image hosting for product images.
"""

import os
import time
import hashlib
import logging
from functools import lru_cache
from typing import Dict, Optional

import cloudinary
import cloudinary.uploader

from config import settings
from services.errors import ClientError, InternalError, ServiceUnavailableError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10MB
PRODUCTS_FOLDER = "products"


class CloudinaryService:
    """Product image upload/delete on Cloudinary."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def upload_product_image(self, file_content: bytes, product_id: int) -> Dict[str, str]:
        """
        Uploads an image for a product.

        Args:
            file_content: raw file bytes
            product_id: owning product

        Returns:
            Dict with public_id, url, width, height, format and bytes
        """
        public_id = self._generate_product_public_id(product_id)
        try:
            result = cloudinary.uploader.upload(
                file_content,
                public_id=public_id,
                folder=PRODUCTS_FOLDER,
                resource_type="image",
                transformation=[
                    {"width": 1200, "height": 1200, "crop": "limit"},
                    {"quality": "auto:good"},
                ],
                format="jpg",
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed for product {product_id}: {e}")
            raise InternalError("Failed to upload image")

        return {
            "public_id": result["public_id"],
            "url": result["secure_url"],
            "width": result["width"],
            "height": result["height"],
            "format": result["format"],
            "bytes": result["bytes"],
        }

    def delete_image(self, public_id: str) -> bool:
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type="image")
        except Exception as e:
            logger.error(f"Cloudinary delete failed for {public_id}: {e}")
            return False
        return result.get("result") == "ok"

    def _generate_product_public_id(self, product_id: int) -> str:
        timestamp_hash = hashlib.md5(str(time.time()).encode()).hexdigest()[:8]
        return f"product_{product_id}_{timestamp_hash}"


def validate_image_file(file_content: bytes, filename: Optional[str]) -> None:
    """Raises ClientError unless the upload looks like a supported image."""
    file_ext = os.path.splitext(filename or "")[1].lower()
    if file_ext not in ALLOWED_EXTENSIONS:
        raise ClientError(
            f"Unsupported file type. Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
    if len(file_content) > MAX_IMAGE_BYTES:
        raise ClientError("File exceeds the 10MB limit")
    if not _is_valid_image_header(file_content):
        raise ClientError("File is not a valid image")


def _is_valid_image_header(file_content: bytes) -> bool:
    if len(file_content) < 12:
        return False
    return (
        file_content.startswith(b"\xff\xd8\xff")               # JPEG
        or file_content.startswith(b"\x89PNG\r\n\x1a\n")       # PNG
        or file_content.startswith((b"GIF87a", b"GIF89a"))     # GIF
        or file_content.startswith(b"BM")                      # BMP
        or file_content[8:12] == b"WEBP"                       # WebP
    )


@lru_cache(maxsize=1)
def _build_service(cloud_name: str, api_key: str, api_secret: str) -> CloudinaryService:
    return CloudinaryService(cloud_name, api_key, api_secret)


def get_cloudinary_service() -> CloudinaryService:
    """FastAPI dependency; 503 when Cloudinary is not configured."""
    if not all([settings.CLOUDINARY_CLOUD_NAME, settings.CLOUDINARY_API_KEY, settings.CLOUDINARY_API_SECRET]):
        raise ServiceUnavailableError("Cloudinary service not available")
    return _build_service(
        settings.CLOUDINARY_CLOUD_NAME,
        settings.CLOUDINARY_API_KEY,
        settings.CLOUDINARY_API_SECRET,
    )
