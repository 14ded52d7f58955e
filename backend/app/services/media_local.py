"""
Local Disk Media Uploader

Copies files under MEDIA_ROOT and serves them from MEDIA_BASE_URL.
Meant for development and tests, where no Cloudinary account is configured.
"""
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Optional

from .media_base import MediaUploader, UploadResult
from ..config import settings

logger = logging.getLogger("uvicorn.error")


class LocalMediaUploader(MediaUploader):
    """Stores uploads on the local filesystem"""

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None):
        self.root = Path(root or settings.media_root)
        self.base_url = (base_url or settings.media_base_url).rstrip("/")

    @property
    def name(self) -> str:
        return "Local disk"

    def is_available(self) -> bool:
        return True

    async def upload(self, local_path: Optional[str]) -> Optional[UploadResult]:
        if not local_path or not os.path.isfile(local_path):
            return None
        self.root.mkdir(parents=True, exist_ok=True)
        suffix = Path(local_path).suffix
        stored_name = f"{uuid.uuid4().hex}{suffix}"
        target = self.root / stored_name
        try:
            shutil.copyfile(local_path, target)
        except OSError:
            logger.exception("[media] local copy failed for %s", local_path)
            return None
        return UploadResult(
            url=f"{self.base_url}/{stored_name}",
            public_id=stored_name,
            resource_type="auto",
            bytes=target.stat().st_size,
        )
