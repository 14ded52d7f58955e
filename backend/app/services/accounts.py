"""
Account Handlers

Request-scoped account operations. Each handler validates its input,
orchestrates the credential store, media uploader and token service, and
returns plain data or raises an ApiError.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.errors import ApiError, BadRequest, Conflict, InternalError, NotFound, Unauthorized
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.services import tokens, user_store
from app.services.media_base import MediaFiles, MediaUploader

logger = logging.getLogger("uvicorn.error")


@dataclass
class RegistrationFields:
    full_name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


def sanitize_user(u: User) -> dict:
    """
    Public view of a user: never includes the password hash or refresh token.
    """
    return {
        "id": str(u.id),
        "username": u.username,
        "email": u.email,
        "fullName": u.full_name,
        "avatar": u.avatar,
        "coverImage": u.cover_image or "",
        "createdAt": u.created_at.isoformat() if u.created_at else None,
        "updatedAt": u.updated_at.isoformat() if u.updated_at else None,
    }


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


async def _require_user(user_id) -> User:
    user = await user_store.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


async def register_user(fields: RegistrationFields, files: MediaFiles, uploader: MediaUploader) -> dict:
    if any(_blank(v) for v in (fields.full_name, fields.email, fields.username, fields.password)):
        raise BadRequest("All fields are required")

    username = fields.username.strip().lower()
    email = fields.email.strip().lower()

    if await user_store.find_by_identifier(username=username, email=email):
        raise Conflict("User with email or username already exists")

    if not files.avatar:
        raise BadRequest("Avatar file is required")

    avatar = await uploader.upload(files.avatar)
    cover_image = await uploader.upload(files.cover_image)
    if avatar is None:
        raise BadRequest("Avatar file is required")

    user = await user_store.create_user(
        full_name=fields.full_name.strip(),
        avatar=avatar.url,
        cover_image=cover_image.url if cover_image else "",
        email=email,
        password_hash=hash_password(fields.password),
        username=username,
    )

    created = await user_store.find_by_id(user.id)
    if created is None:
        raise InternalError("Something went wrong while registering the user")
    logger.info("[auth] registered user %s (%s)", created.username, created.id)
    return sanitize_user(created)


async def login_user(username: Optional[str], email: Optional[str], password: Optional[str]) -> dict:
    """
    Authenticate by username or email.

    Returns the sanitized user with both session tokens; the router mirrors the
    tokens into cookies.
    """
    if _blank(username) and _blank(email):
        raise BadRequest("username or email is required")

    user = await user_store.find_by_identifier(username=username, email=email)
    if user is None:
        raise NotFound("User does not exist")

    if not verify_password(password or "", user.password_hash):
        raise BadRequest("Invalid user credentials")

    pair = await tokens.issue(user.id)
    user = await _require_user(user.id)
    logger.info("[auth] user %s logged in", user.id)
    return {
        "user": sanitize_user(user),
        "accessToken": pair.access_token,
        "refreshToken": pair.refresh_token,
    }


async def logout_user(user_id) -> None:
    await tokens.revoke(user_id)
    logger.info("[auth] user %s logged out", user_id)


async def refresh_session(incoming_refresh_token: Optional[str]) -> dict:
    """
    Exchange a refresh token for a new pair.

    Every failure is reported as Unauthorized, keeping verification
    internals out of 500 responses.
    """
    try:
        _, pair = await tokens.verify_refresh(incoming_refresh_token)
    except Unauthorized:
        raise
    except ApiError as e:
        raise Unauthorized(e.message) from e
    except Exception as e:
        raise Unauthorized(str(e) or "Invalid refresh token") from e
    return {"accessToken": pair.access_token, "refreshToken": pair.refresh_token}


async def change_password(user_id, old_password: Optional[str], new_password: Optional[str]) -> None:
    if _blank(new_password):
        raise BadRequest("New password is required")
    user = await _require_user(user_id)
    if not verify_password(old_password or "", user.password_hash):
        raise BadRequest("Invalid old password")
    await user_store.update_by_id(user.id, password_hash=hash_password(new_password))


async def get_current_user(user_id) -> dict:
    return sanitize_user(await _require_user(user_id))


async def update_account(user_id, full_name: Optional[str], email: Optional[str]) -> dict:
    if _blank(full_name) or _blank(email):
        raise BadRequest("All fields are required")
    user = await user_store.update_by_id(user_id, full_name=full_name.strip(), email=email.strip().lower())
    if user is None:
        raise NotFound("User not found")
    return sanitize_user(user)


async def _replace_media(user_id, local_path: Optional[str], uploader: MediaUploader, column: str, label: str) -> dict:
    if not local_path:
        raise BadRequest(f"{label} file is missing")
    uploaded = await uploader.upload(local_path)
    if uploaded is None or not uploaded.url:
        raise BadRequest(f"Error while uploading {label.lower()}")
    user = await user_store.update_by_id(user_id, **{column: uploaded.url})
    if user is None:
        raise NotFound("User not found")
    return sanitize_user(user)


async def update_avatar(user_id, local_path: Optional[str], uploader: MediaUploader) -> dict:
    return await _replace_media(user_id, local_path, uploader, "avatar", "Avatar")


async def update_cover_image(user_id, local_path: Optional[str], uploader: MediaUploader) -> dict:
    return await _replace_media(user_id, local_path, uploader, "cover_image", "Cover image")
