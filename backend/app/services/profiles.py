"""
Profile Aggregator

Queries joining users with subscriptions, videos and watch history, plus the
append that extends a watch history.
Each query runs its steps in a fixed order: lookup, join, derive, project.
"""
import logging
from typing import Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from app.core.errors import BadRequest, NotFound
from app.models.subscription import Subscription
from app.models.user import User
from app.models.video import WatchHistory

logger = logging.getLogger("uvicorn.error")


async def _lookup_channel(username: str) -> User:
    user = await User.get_or_none(username__iexact=username.strip())
    if user is None:
        raise NotFound("Channel does not exist")
    return user


async def _join_subscribers(channel: User, viewer_id) -> dict:
    """Channel-side edges: who subscribes to `channel`, and is the viewer one of them."""
    edges = Subscription.filter(channel_id=channel.id)
    count = await edges.count()
    is_subscribed = False
    if viewer_id is not None:
        is_subscribed = await edges.filter(subscriber_id=viewer_id).exists()
    return {"subscriberCount": count, "isSubscribed": is_subscribed}


async def _join_subscribed_to(channel: User) -> dict:
    """Subscriber-side edges: channels that `channel` itself subscribes to."""
    count = await Subscription.filter(subscriber_id=channel.id).count()
    return {"channelSubscribedToCount": count}


def _project_channel(channel: User, derived: dict) -> dict:
    return {
        "id": str(channel.id),
        "fullName": channel.full_name,
        "username": channel.username,
        "email": channel.email,
        "avatar": channel.avatar,
        "coverImage": channel.cover_image or "",
        "subscriberCount": derived["subscriberCount"],
        "channelSubscribedToCount": derived["channelSubscribedToCount"],
        "isSubscribed": derived["isSubscribed"],
    }


async def get_channel_profile(viewer_id, username: Optional[str]) -> dict:
    """
    Public channel view of `username` as seen by `viewer_id`.

    Raises:
        BadRequest: blank username
        NotFound: no user with that username (case-insensitive)
    """
    if not username or not username.strip():
        raise BadRequest("username is missing")

    channel = await _lookup_channel(username)
    derived = {}
    derived.update(await _join_subscribers(channel, viewer_id))
    derived.update(await _join_subscribed_to(channel))
    return _project_channel(channel, derived)


def _project_owner(owner: User) -> dict:
    return {
        "id": str(owner.id),
        "fullName": owner.full_name,
        "username": owner.username,
        "avatar": owner.avatar,
    }


def _project_video(entry: WatchHistory) -> dict:
    video = entry.video
    return {
        "id": str(video.id),
        "videoFile": video.video_file,
        "thumbnail": video.thumbnail,
        "title": video.title,
        "description": video.description,
        "duration": video.duration,
        "views": video.views,
        "isPublished": video.is_published,
        "createdAt": video.created_at.isoformat() if video.created_at else None,
        "watchedAt": entry.watched_at.isoformat() if entry.watched_at else None,
        "owner": _project_owner(video.owner),
    }


async def get_watch_history(user_id) -> list[dict]:
    """
    The user's watched videos in history order, each with its owner's public
    fields flattened into a single `owner` object.
    """
    entries = await (
        WatchHistory.filter(user_id=user_id)
        .order_by("seq")
        .prefetch_related("video__owner")
    )
    return [_project_video(e) for e in entries]


async def append_watch_history(user_id, video_id, attempts: int = 3) -> WatchHistory:
    """
    Record that the user watched a video, at the end of their history.

    The next `seq` is read and written in one transaction. A concurrent append
    that claims the same `seq` trips the (user, seq) unique constraint, and the
    append is retried up to `attempts` times before the IntegrityError escapes.
    """
    for attempt in range(1, attempts + 1):
        try:
            async with in_transaction() as conn:
                last = await WatchHistory.filter(user_id=user_id).using_db(conn).order_by("-seq").first()
                next_seq = last.seq + 1 if last else 0
                return await WatchHistory.create(user_id=user_id, video_id=video_id, seq=next_seq, using_db=conn)
        except IntegrityError:
            if attempt == attempts:
                raise
            logger.warning("[history] seq collision for user %s, retrying (%d/%d)", user_id, attempt, attempts)
