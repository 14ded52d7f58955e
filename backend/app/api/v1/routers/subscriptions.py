# app/api/v1/routers/subscriptions.py
import uuid

from fastapi import APIRouter, Depends
from app.api.v1.deps import get_current_user
from app.core.errors import BadRequest, NotFound, api_response
from app.models.subscription import Subscription
from app.models.user import User

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

@router.post("/c/{channel_id}")
async def toggle_subscription(channel_id: str, user: User = Depends(get_current_user)):
    """
    Subscribe the caller to a channel, or unsubscribe if already subscribed.

    Returns:
        envelope with data.subscribed: the state after the toggle

    Errors:
        400 malformed channel id / subscribing to oneself
        404 channel does not exist
    """
    try:
        cid = uuid.UUID(channel_id)
    except ValueError:
        raise BadRequest("Invalid channel id")
    if cid == user.id:
        raise BadRequest("Cannot subscribe to your own channel")

    channel = await User.get_or_none(id=cid)
    if not channel:
        raise NotFound("Channel does not exist")

    existing = await Subscription.get_or_none(subscriber_id=user.id, channel_id=channel.id)
    if existing:
        await existing.delete()
        return api_response(200, {"subscribed": False}, "Unsubscribed successfully")

    await Subscription.create(subscriber_id=user.id, channel_id=channel.id)
    return api_response(200, {"subscribed": True}, "Subscribed successfully")
