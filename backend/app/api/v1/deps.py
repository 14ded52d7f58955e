from fastapi import Header, Request
from app.core.errors import Unauthorized
from app.core.security import decode_access_token
from app.models.user import User
from app.services.media_base import MediaUploader
from app.services.media_factory import get_media_uploader as _select_media_uploader

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    This dependency extracts and validates the JWT access token from either:
    1. Authorization header (Bearer token)
    2. HttpOnly cookie (accessToken) - browser clients

    Raises:
        Unauthorized (401): no token, invalid/expired token, or unknown user

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": str(user.id)}
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie: accessToken
    if not token:
        token = request.cookies.get("accessToken")

    if not token:
        raise Unauthorized("Unauthorized request")

    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
    except Exception:
        raise Unauthorized("Invalid Access Token")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise Unauthorized("Invalid Access Token")
    return user

def get_media_uploader() -> MediaUploader:
    """
    FastAPI dependency for the configured media uploader.
    Overridden in tests through app.dependency_overrides.
    """
    return _select_media_uploader()
