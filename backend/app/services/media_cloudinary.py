"""
Cloudinary Media Uploader

Uploads local files through Cloudinary's signed upload REST API
"""
import hashlib
import logging
import os
import time
from typing import Optional

import httpx

from .media_base import MediaUploader, UploadResult
from ..config import settings

logger = logging.getLogger("uvicorn.error")


def sign_params(params: dict, api_secret: str) -> str:
    """
    Cloudinary request signature: sha1 of the sorted `key=value` pairs joined by
    `&`, immediately followed by the API secret.
    """
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader(MediaUploader):
    """Cloudinary upload API service"""

    def __init__(self):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.api_base = settings.cloudinary_api_base
        self.timeout = settings.cloudinary_timeout_sec

    @property
    def name(self) -> str:
        return "Cloudinary"

    def is_available(self) -> bool:
        """Check if credentials are configured"""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @property
    def upload_url(self) -> str:
        # resource_type "auto" lets Cloudinary detect image / video
        return f"{self.api_base}/{self.cloud_name}/auto/upload"

    async def upload(self, local_path: Optional[str]) -> Optional[UploadResult]:
        """
        Upload a file, returning None when there is nothing to upload or
        Cloudinary rejects the request.
        """
        if not local_path:
            return None
        if not self.is_available():
            raise RuntimeError(f"{self.name}: credentials not configured")

        params = {"timestamp": int(time.time())}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                with open(local_path, "rb") as f:
                    files = {"file": (os.path.basename(local_path), f)}
                    resp = await client.post(self.upload_url, data=data, files=files)
                resp.raise_for_status()
                result = resp.json()
        except (httpx.HTTPError, OSError, ValueError):
            logger.exception("[media] %s upload failed for %s", self.name, local_path)
            return None

        if not isinstance(result, dict):
            logger.warning("[media] %s response is not an object: %r", self.name, result)
            return None
        url = result.get("secure_url") or result.get("url")
        if not url:
            logger.warning("[media] %s response without url: %s", self.name, result)
            return None
        logger.info("[media] uploaded %s -> %s", local_path, url)
        return UploadResult(
            url=url,
            public_id=result.get("public_id"),
            resource_type=result.get("resource_type"),
            bytes=result.get("bytes"),
        )


# Global singleton (optional)
cloudinary_uploader = CloudinaryUploader()
