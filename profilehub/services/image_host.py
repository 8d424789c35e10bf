"""
Image Host Client - forwards profile images to Cloudinary.

Uses Cloudinary's signed upload REST endpoint directly:
    POST https://api.cloudinary.com/v1_1/<cloud>/image/upload
with api_key, timestamp and a SHA-1 signature of the signed params plus
the API secret. The response's secure_url becomes the profile imageUrl.
"""

import hashlib
import logging
import time
from functools import lru_cache
from typing import Optional

import httpx

from profilehub.core.config import get_settings

logger = logging.getLogger(__name__)


class ImageUploadError(Exception):
    """Raised when the image host fails or returns an unexpected response."""


def sign_params(params: dict, api_secret: str) -> str:
    """Cloudinary signature: sorted k=v pairs joined by '&', secret appended, SHA-1."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    def __init__(self, upload_url: str, api_key: str, api_secret: str, timeout: float = 10.0):
        self.upload_url = upload_url
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    async def upload(self, content: bytes, filename: str) -> str:
        """Upload image bytes and return the hosted HTTPS URL."""
        params = {"timestamp": str(int(time.time()))}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        files = {"file": (filename, content)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.post(self.upload_url, data=data, files=files)
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPStatusError as e:
            text = getattr(e.response, "text", None) or ""
            logger.warning("Cloudinary error %s: %s", e.response.status_code, text[:500])
            raise ImageUploadError("Image host returned an error.") from e
        except httpx.RequestError as e:
            raise ImageUploadError("Image host unavailable.") from e
        except ValueError as e:
            raise ImageUploadError("Image host returned invalid JSON.") from e

        url = body.get("secure_url") if isinstance(body, dict) else None
        if not url:
            raise ImageUploadError("Image host response had no secure_url.")
        return url


@lru_cache
def get_image_uploader() -> Optional[CloudinaryUploader]:
    """Dependency - configured uploader, or None when credentials are missing."""
    s = get_settings()
    if not (s.cloudinary_cloud_name and s.cloudinary_api_key and s.cloudinary_api_secret):
        return None
    return CloudinaryUploader(
        upload_url=s.cloudinary_upload_url,
        api_key=s.cloudinary_api_key,
        api_secret=s.cloudinary_api_secret,
        timeout=s.http_timeout_seconds,
    )
