# app/api/v1/routers/users.py
import json
import os
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from app.api.v1.deps import get_current_user, get_media_uploader
from app.config import settings
from app.core.errors import Unauthorized, api_response
from app.models.user import User
from app.schemas.auth import ChangePasswordIn, LoginRequest, UpdateAccountIn
from app.services import accounts, profiles
from app.services.media_base import MediaFiles, MediaUploader

router = APIRouter(prefix="/users", tags=["users"])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

# ===== Helpers =====
def _cookie_options() -> dict:
    return {"httponly": True, "secure": settings.cookie_secure, "samesite": settings.cookie_samesite}

def _set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie(ACCESS_COOKIE, access_token, **_cookie_options())
    response.set_cookie(REFRESH_COOKIE, refresh_token, **_cookie_options())

def _clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_COOKIE, **_cookie_options())
    response.delete_cookie(REFRESH_COOKIE, **_cookie_options())

def _spool(upload: UploadFile | None) -> str | None:
    """
    Copy an uploaded part to a local temporary file and return its path.
    Returns None when the part is absent.
    """
    if upload is None or not upload.filename:
        return None
    suffix = Path(upload.filename).suffix
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=suffix, dir=settings.upload_tmp_dir)
    with tmp:
        shutil.copyfileobj(upload.file, tmp)
    return tmp.name

def _discard(*paths: str | None) -> None:
    for p in paths:
        if p and os.path.exists(p):
            os.remove(p)

async def _body_refresh_token(request: Request) -> str | None:
    """
    Read `refreshToken` from a JSON body. An empty body gives None. Anything
    that is not a JSON object with a string token raises Unauthorized.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        raise Unauthorized("Invalid refresh token")
    if not isinstance(payload, dict):
        raise Unauthorized("Invalid refresh token")
    token = payload.get("refreshToken")
    if token is not None and not isinstance(token, str):
        raise Unauthorized("Invalid refresh token")
    return token

# ===== Routes =====
@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    fullName: str | None = Form(default=None),
    email: str | None = Form(default=None),
    username: str | None = Form(default=None),
    password: str | None = Form(default=None),
    avatar: UploadFile | None = File(default=None),
    coverImage: UploadFile | None = File(default=None),
    uploader: MediaUploader = Depends(get_media_uploader),
):
    """
    Register a new user account (multipart form).

    Form fields fullName, email, username and password are required and must
    not be blank. File part `avatar` is required, `coverImage` is optional.
    Username and email are stored lower-cased.

    Returns:
        201 envelope with the created user (no password, no refresh token)

    Errors:
        400 missing fields / missing avatar / avatar upload failed
        409 username or email already registered
    """
    files = MediaFiles(avatar=_spool(avatar), cover_image=_spool(coverImage))
    try:
        user = await accounts.register_user(
            accounts.RegistrationFields(full_name=fullName, email=email, username=username, password=password),
            files,
            uploader,
        )
    finally:
        _discard(files.avatar, files.cover_image)
    return api_response(status.HTTP_201_CREATED, user, "User registered successfully")

@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate with username or email plus password.

    Both tokens are returned in the body and also set as httpOnly, secure
    cookies, so browser and non-browser clients are served alike.

    Errors:
        400 no identifier / wrong password
        404 unknown user
    """
    data = await accounts.login_user(payload.username, payload.email, payload.password)
    _set_session_cookies(response, data["accessToken"], data["refreshToken"])
    return api_response(200, data, "User logged in successfully")

@router.post("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    """
    Revoke the server-side refresh token and clear both auth cookies.
    Any refresh token held by the client stops working immediately.
    """
    await accounts.logout_user(user.id)
    _clear_session_cookies(response)
    return api_response(200, {}, "User logged out")

@router.post("/refresh-token")
async def refresh_token(request: Request, response: Response):
    """
    Rotate the session: exchange the current refresh token (cookie or body)
    for a new access/refresh pair. Every failure is a 401, malformed bodies
    included.
    """
    incoming = request.cookies.get(REFRESH_COOKIE) or await _body_refresh_token(request)
    data = await accounts.refresh_session(incoming)
    _set_session_cookies(response, data["accessToken"], data["refreshToken"])
    return api_response(200, data, "Access token refreshed")

@router.post("/change-password")
async def change_password(body: ChangePasswordIn, user: User = Depends(get_current_user)):
    await accounts.change_password(user.id, body.oldPassword, body.newPassword)
    return api_response(200, {}, "Password changed successfully")

@router.get("/current-user")
async def current_user(user: User = Depends(get_current_user)):
    return api_response(200, await accounts.get_current_user(user.id), "Current user fetched successfully")

@router.patch("/update-account")
async def update_account(body: UpdateAccountIn, user: User = Depends(get_current_user)):
    """
    Update fullName and email; both are required.
    """
    updated = await accounts.update_account(user.id, body.fullName, body.email)
    return api_response(200, updated, "Account details updated successfully")

@router.patch("/avatar")
async def update_avatar(
    avatar: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    uploader: MediaUploader = Depends(get_media_uploader),
):
    path = _spool(avatar)
    try:
        updated = await accounts.update_avatar(user.id, path, uploader)
    finally:
        _discard(path)
    return api_response(200, updated, "Avatar updated successfully")

@router.patch("/cover-image")
async def update_cover_image(
    coverImage: UploadFile | None = File(default=None),
    user: User = Depends(get_current_user),
    uploader: MediaUploader = Depends(get_media_uploader),
):
    path = _spool(coverImage)
    try:
        updated = await accounts.update_cover_image(user.id, path, uploader)
    finally:
        _discard(path)
    return api_response(200, updated, "Cover image updated successfully")

@router.get("/c/{username}")
async def channel_profile(username: str, user: User = Depends(get_current_user)):
    """
    Public channel profile with subscriber counts and whether the caller
    is subscribed.

    Errors:
        404 no such channel
    """
    channel = await profiles.get_channel_profile(user.id, username)
    return api_response(200, channel, "User channel fetched successfully")

@router.get("/history")
async def watch_history(user: User = Depends(get_current_user)):
    history = await profiles.get_watch_history(user.id)
    return api_response(200, history, "Watch history fetched successfully")
