"""Video feed and video detail pipelines"""
from typing import List, Optional

from core.models import Like, Subscription, Video
from readmodel.pipeline import NEST, Pipeline
from readmodel.stages import (
    AttachOwner,
    AttachRelatedCount,
    AttachViewerFlag,
    Match,
    Project,
    Sort,
)

# Public columns of a video; owner_id is always replaced by a nested owner object
VIDEO_FIELDS = (
    "id",
    "title",
    "description",
    "video_file",
    "thumbnail",
    "duration",
    "views",
    "is_published",
    "created_at",
    "updated_at",
)

VIDEO_SORT_FIELDS = ("created_at", "updated_at", "views", "duration", "title")


def nested_video_fields(prefix: str, owner: Optional[str] = "owner_details") -> List[str]:
    """Projection names for a video attached under `prefix` (and its owner summary)"""
    names = [f"{prefix}{NEST}{f}" for f in VIDEO_FIELDS]
    if owner:
        names.append(f"{prefix}{NEST}{owner}")
    return names


def video_feed(
    search: Optional[str] = None,
    owner_id: Optional[str] = None,
    sort_field: str = "created_at",
    sort_direction: str = "desc",
) -> Pipeline:
    """Published videos, optionally filtered by title substring and owner"""
    pipeline = Pipeline("video_feed", Video, VIDEO_FIELDS + ("owner_id",))
    pipeline.then(Match.is_true("is_published"))
    if search:
        pipeline.then(Match.contains("title", search))
    if owner_id:
        pipeline.then(Match.equals("owner_id", owner_id))

    return pipeline.extend(
        AttachOwner("owner_details", "owner_id"),
        Sort(sort_field, sort_direction),
        Project(*VIDEO_FIELDS, "owner_details"),
    )


def video_detail(video_id: str, viewer_id: Optional[str]) -> Pipeline:
    """Single video with like stats and its owner's channel stats, personalised for viewer"""
    return Pipeline("video_detail", Video, VIDEO_FIELDS + ("owner_id",)).extend(
        Match.equals("id", video_id),
        AttachRelatedCount("likes_count", Like, "video_id"),
        AttachViewerFlag("is_liked", Like, "video_id", "liked_by_id", viewer_id),
        AttachOwner("owner", "owner_id"),
        AttachRelatedCount("owner__subscribers_count", Subscription, "channel_id", key="owner__id"),
        AttachViewerFlag(
            "owner__is_subscribed", Subscription, "channel_id", "subscriber_id", viewer_id,
            key="owner__id"
        ),
        Project(*VIDEO_FIELDS, "likes_count", "is_liked", "owner"),
    )
