# app/models/user.py
"""
Database model for users.
Represents a user account (and channel) on the platform, containing
authentication credentials, profile information and the current session's
refresh token.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Subscriptions as subscriber (related_name="subscriptions")
    - Has many Subscriptions as channel (related_name="subscribers")
    - Has many Videos (related_name="videos")
    - Has many WatchHistory entries (related_name="watch_history")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - refresh_token holds the single currently valid refresh token; null when logged out
    - Username and email are unique and stored lower-cased
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    username = fields.CharField(max_length=256, unique=True, index=True)  # Lower-cased login / channel name
    email = fields.CharField(max_length=256, unique=True, index=True)  # Lower-cased email address
    full_name = fields.CharField(max_length=256, index=True)
    avatar = fields.CharField(max_length=1024)  # Avatar URL from the media uploader
    cover_image = fields.CharField(max_length=1024, default="")  # Cover image URL, empty if none
    password_hash = fields.CharField(max_length=255)
    refresh_token = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def __str__(self) -> str:
        return self.username
