# app/models/subscription.py
import uuid
from tortoise import fields, models

class Subscription(models.Model):
    """
    Directed subscription edge: `subscriber` follows `channel`.
    Both ends are users; a given pair appears at most once.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    subscriber = fields.ForeignKeyField(
        "models.User",
        related_name="subscriptions",
        on_delete=fields.CASCADE,
    )  # The one who subscribes
    channel = fields.ForeignKeyField(
        "models.User",
        related_name="subscribers",
        on_delete=fields.CASCADE,
    )  # The channel being subscribed to
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "subscriptions"
        unique_together = (("subscriber", "channel"),)
