"""
Token Service

Issues, verifies, rotates and revokes session tokens. The refresh token is
persisted on the user record; only the most recently issued one is valid.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import jwt  # PyJWT
from tortoise.exceptions import BaseORMException

from app.core.errors import ApiError, InternalError, Unauthorized
from app.core.security import create_access_token, create_refresh_token, decode_refresh_token
from app.services import user_store

logger = logging.getLogger("uvicorn.error")


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


async def issue(user_id) -> TokenPair:
    """
    Sign a new access/refresh pair for the user and store the refresh token
    on the user record, replacing any previous one.
    """
    try:
        user = await user_store.find_by_id(user_id)
        if user is None:
            raise InternalError("Something went wrong while generating refresh and access token")
        access_token = create_access_token(str(user.id), user.username, user.email, user.full_name)
        refresh_token = create_refresh_token(str(user.id))
        stored = await user_store.update_by_id(user.id, refresh_token=refresh_token)
    except ApiError:
        raise
    except BaseORMException as e:
        raise InternalError("Something went wrong while generating refresh and access token") from e
    if stored is None:
        raise InternalError("Something went wrong while generating refresh and access token")
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


async def verify_refresh(token: Optional[str]) -> Tuple[str, TokenPair]:
    """
    Validate a client's refresh token and rotate it.

    The token must verify against the refresh secret, name an existing user
    and equal the value stored on that user. Returns the user id and a fresh
    token pair.
    """
    if not token:
        raise Unauthorized("Unauthorized request")

    try:
        payload = decode_refresh_token(token)
    except jwt.PyJWTError as e:
        raise Unauthorized("Invalid refresh token") from e

    user = await user_store.find_by_id(payload.get("sub"))
    if user is None:
        raise Unauthorized("Invalid refresh token")

    if token != user.refresh_token:
        logger.warning("[auth] stale refresh token presented for user %s", user.id)
        raise Unauthorized("Refresh token is expired or used")

    pair = await issue(user.id)
    return str(user.id), pair


async def revoke(user_id) -> None:
    """Clear the stored refresh token, ending the session server-side."""
    await user_store.update_by_id(user_id, refresh_token=None)
