"""
Media Uploader Abstract Interface

Provides unified interface for media storage providers (Cloudinary / local disk).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class UploadResult:
    """Durable location of an uploaded file"""
    url: str
    public_id: Optional[str] = None
    resource_type: Optional[str] = None
    bytes: Optional[int] = None


@dataclass
class MediaFiles:
    """
    Local paths of the files attached to a request, by field name.
    A field is None when the client did not send it.
    """
    avatar: Optional[str] = None
    cover_image: Optional[str] = None


class MediaUploader(ABC):
    """Media Uploader Abstract Base Class"""

    @abstractmethod
    async def upload(self, local_path: Optional[str]) -> Optional[UploadResult]:
        """
        Upload a local file

        Parameters:
        - local_path: Path of the file to upload; None yields None

        Returns:
        - UploadResult, or None if nothing was uploaded
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if service is available"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name (e.g., "Cloudinary")"""
        pass
