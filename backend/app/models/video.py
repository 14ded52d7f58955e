# app/models/video.py
"""
Database models for videos and per-user watch history.
"""
import uuid
from tortoise import fields, models

class Video(models.Model):
    """
    Video database model.

    Relationships:
    - Belongs to an owner User (many-to-one, related_name="videos")
    - Referenced by WatchHistory entries
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    video_file = fields.CharField(max_length=1024)  # Media URL of the video itself
    thumbnail = fields.CharField(max_length=1024)
    title = fields.CharField(max_length=256)
    description = fields.TextField(default="")
    duration = fields.FloatField(default=0)  # Seconds
    views = fields.IntField(default=0)
    is_published = fields.BooleanField(default=True)
    owner = fields.ForeignKeyField("models.User", related_name="videos", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "videos"


class WatchHistory(models.Model):
    id = fields.IntField(pk=True)
    user = fields.ForeignKeyField("models.User", related_name="watch_history", on_delete=fields.CASCADE)
    video = fields.ForeignKeyField("models.Video", related_name="watched_by", on_delete=fields.CASCADE)

    seq = fields.IntField()  # Position in the user's history, ascending
    watched_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "watch_history"
        unique_together = (("user", "seq"),)
