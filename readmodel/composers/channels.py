"""Channel profile and subscription list pipelines"""
from typing import Optional

from core.models import Subscription, User, Video
from readmodel.composers.videos import VIDEO_FIELDS
from readmodel.pipeline import Pipeline
from readmodel.stages import (
    AttachLatest,
    AttachOwner,
    AttachRelatedCount,
    AttachViewerFlag,
    Derive,
    Match,
    Project,
    Sort,
)

CHANNEL_FIELDS = ("id", "username", "full_name", "email", "avatar", "cover_image", "created_at")

LATEST_VIDEO_FIELDS = tuple(f for f in VIDEO_FIELDS if f not in ("is_published", "updated_at"))

_SUBSCRIPTION_FIELDS = ("id", "subscriber_id", "channel_id", "created_at")


def channel_profile(username: str, viewer_id: Optional[str]) -> Pipeline:
    return Pipeline("channel_profile", User, CHANNEL_FIELDS).extend(
        Match.iequals("username", username),
        AttachRelatedCount("subscribers_count", Subscription, "channel_id"),
        AttachRelatedCount("channels_subscribed_to_count", Subscription, "subscriber_id"),
        AttachViewerFlag("is_subscribed", Subscription, "channel_id", "subscriber_id", viewer_id),
        Project(
            *CHANNEL_FIELDS,
            "subscribers_count",
            "channels_subscribed_to_count",
            "is_subscribed",
        ),
    )


def channel_subscribers(channel_id: str) -> Pipeline:
    """
    Subscribers of a channel. Per subscriber: their own subscriber count and
    whether the queried channel subscribes back to them.
    """
    return Pipeline("channel_subscribers", Subscription, _SUBSCRIPTION_FIELDS).extend(
        Match.equals("channel_id", channel_id),
        AttachOwner("subscriber", "subscriber_id", required=True),
        AttachRelatedCount(
            "subscriber__subscribers_count", Subscription, "channel_id", key="subscriber__id"
        ),
        AttachViewerFlag(
            "subscriber__subscribed_to_subscriber", Subscription, "channel_id", "subscriber_id",
            channel_id, key="subscriber__id"
        ),
        Derive("subscribed_at", lambda f: f["created_at"], {"created_at"}),
        Sort("subscribed_at", "desc"),
        Project("subscriber", "subscribed_at"),
    )


def subscribed_channels(subscriber_id: str) -> Pipeline:
    """Channels a user subscribes to, each with its latest published video"""
    return Pipeline("subscribed_channels", Subscription, _SUBSCRIPTION_FIELDS).extend(
        Match.equals("subscriber_id", subscriber_id),
        AttachOwner("channel", "channel_id", required=True),
        AttachRelatedCount("channel__subscribers_count", Subscription, "channel_id", key="channel__id"),
        AttachLatest(
            "channel__latest_video", Video, "owner_id", key="channel__id",
            fields=LATEST_VIDEO_FIELDS,
            where=lambda video: video.is_published.is_(True),
        ),
        Derive("subscribed_at", lambda f: f["created_at"], {"created_at"}),
        Sort("subscribed_at", "desc"),
        Project("channel", "subscribed_at"),
    )
