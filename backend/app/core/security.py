# app/core/security.py
"""
Security module for authentication.
Handles password hashing and JWT access/refresh token creation and validation.
"""
import uuid
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from app.config import settings

# Password hashing context
# Argon2 is a modern, salted password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# JWT configuration
# Access and refresh tokens use distinct secrets, so one can never pass as the other
ACCESS_TOKEN_SECRET = settings.access_token_secret
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
REFRESH_TOKEN_SECRET = settings.refresh_token_secret
REFRESH_TOKEN_EXPIRE_MINUTES = settings.refresh_token_expire_minutes
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    Returns False for an empty or malformed stored hash instead of raising.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False

def _encode(payload: dict, secret: str, minutes: int) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        **payload,
        "jti": uuid.uuid4().hex,  # Unique per token, so a rotated token never equals its predecessor
        "iat": now,
        "exp": now + dt.timedelta(minutes=minutes),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)

def create_access_token(user_id: str, username: str, email: str, full_name: str) -> str:
    """
    Create a short-lived JWT access token.

    The token carries the user's public identity so request handlers can
    identify the caller without another query.

    Token payload includes:
        - sub: Subject (user ID)
        - username, email, fullName: public profile identity
        - type: "access"
        - jti, iat, exp
    """
    return _encode(
        {
            "sub": user_id,
            "username": username,
            "email": email,
            "fullName": full_name,
            "type": "access",
        },
        ACCESS_TOKEN_SECRET,
        ACCESS_TOKEN_EXPIRE_MINUTES,
    )

def create_refresh_token(user_id: str) -> str:
    """
    Create a long-lived JWT refresh token carrying only the user ID.
    """
    return _encode({"sub": user_id, "type": "refresh"}, REFRESH_TOKEN_SECRET, REFRESH_TOKEN_EXPIRE_MINUTES)

def _decode(token: str, secret: str, expected_type: str) -> dict:
    payload = jwt.decode(token, secret, algorithms=[JWT_ALG])
    if payload.get("type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected a {expected_type} token")
    return payload

def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, malformed or not an access token
    """
    return _decode(token, ACCESS_TOKEN_SECRET, "access")

def decode_refresh_token(token: str) -> dict:
    """
    Decode and validate a JWT refresh token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, malformed or not a refresh token
    """
    return _decode(token, REFRESH_TOKEN_SECRET, "refresh")
