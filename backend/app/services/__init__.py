"""
Services Module

Account and session logic plus interfaces to external services:
- Credential store: user persistence (user_store)
- Token service: access/refresh token lifecycle (tokens)
- Account handlers: registration, login, profile updates (accounts)
- Profile aggregator: channel profile and watch history (profiles)
- Media uploader: Cloudinary or local disk (media_*)
"""

# Media uploader (service interface)
from .media_base import (
    MediaFiles,
    MediaUploader,
    UploadResult,
)
from .media_factory import get_media_uploader

__all__ = [
    "MediaFiles",
    "MediaUploader",
    "UploadResult",
    "get_media_uploader",
]
