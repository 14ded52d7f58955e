"""
Media Uploader Factory

Selects the media storage backend from MEDIA_BACKEND
"""
from .media_base import MediaUploader
from .media_cloudinary import cloudinary_uploader
from .media_local import LocalMediaUploader
from ..config import settings


def get_media_uploader() -> MediaUploader:
    """
    Get media uploader

    Returns:
    - MediaUploader: Cloudinary (default) or local disk when MEDIA_BACKEND=local

    Note:
    - Cloudinary needs CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET in .env
    """
    backend = (settings.media_backend or "cloudinary").lower()
    if backend == "local":
        return LocalMediaUploader()
    if backend != "cloudinary":
        raise RuntimeError(f"Unknown MEDIA_BACKEND: {settings.media_backend}")
    if not cloudinary_uploader.is_available():
        raise RuntimeError(
            "Cloudinary not available. Please configure CLOUDINARY_CLOUD_NAME, "
            "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET in .env"
        )
    return cloudinary_uploader

