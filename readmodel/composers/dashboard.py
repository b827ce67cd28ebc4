"""Channel owner dashboard: totals across the channel and its full video list"""
from typing import Any, Mapping

from sqlalchemy import BigInteger, cast, func, select
from sqlalchemy.orm import aliased

from core.models import Comment, Like, Subscription, User, Video
from readmodel.composers.videos import VIDEO_FIELDS
from readmodel.pipeline import Pipeline
from readmodel.stages import AttachRelatedCount, Derive, Match, Project, Sort


def _total_views(fields: Mapping[str, Any]):
    video = aliased(Video)
    return (
        select(cast(func.coalesce(func.sum(video.views), 0), BigInteger))
        .where(video.owner_id == fields["id"])
        .correlate_except(video)
        .scalar_subquery()
    )


def _total_likes(fields: Mapping[str, Any]):
    like = aliased(Like)
    video = aliased(Video)
    return (
        select(func.count(like.id))
        .select_from(like)
        .join(video, video.id == like.video_id)
        .where(video.owner_id == fields["id"])
        .correlate_except(like, video)
        .scalar_subquery()
    )


def channel_stats(user_id: str) -> Pipeline:
    return Pipeline("channel_stats", User, ("id",)).extend(
        Match.equals("id", user_id),
        AttachRelatedCount("total_subscribers", Subscription, "channel_id"),
        AttachRelatedCount("total_videos", Video, "owner_id"),
        Derive("total_views", _total_views, {"id"}),
        Derive("total_likes", _total_likes, {"id"}),
        Project("total_subscribers", "total_videos", "total_views", "total_likes"),
    )


def channel_videos(user_id: str) -> Pipeline:
    """All of the owner's videos, published or not"""
    return Pipeline("channel_videos", Video, VIDEO_FIELDS + ("owner_id",)).extend(
        Match.equals("owner_id", user_id),
        AttachRelatedCount("likes_count", Like, "video_id"),
        AttachRelatedCount("comments_count", Comment, "video_id"),
        Sort("created_at", "desc"),
        Project(*VIDEO_FIELDS, "likes_count", "comments_count"),
    )
