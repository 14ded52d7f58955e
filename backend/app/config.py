# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Video Platform Accounts API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend (comma separated in .env)
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
        if o.strip()
    ]

    # Session tokens
    # Access and refresh tokens are signed with different secrets
    access_token_secret: str = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    refresh_token_secret: str = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret")
    refresh_token_expire_minutes: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 10)))

    # Auth cookies (httpOnly is always on)
    cookie_secure: bool = _env_bool("COOKIE_SECURE", "true")
    cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "lax")

    # Media storage
    # "cloudinary" uploads to Cloudinary, "local" copies into MEDIA_ROOT
    media_backend: str = os.getenv("MEDIA_BACKEND", "cloudinary")
    media_root: str = os.getenv("MEDIA_ROOT", "./public/media")
    media_base_url: str = os.getenv("MEDIA_BASE_URL", "http://localhost:8000/media")
    upload_tmp_dir: str | None = os.getenv("UPLOAD_TMP_DIR")

    # Cloudinary API Settings
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_api_base: str = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")
    cloudinary_timeout_sec: float = float(os.getenv("CLOUDINARY_TIMEOUT_SEC", "60"))

settings = Settings()  # Instantiate configuration
