from core.models import Video, WatchHistoryEntry
from readmodel.composers.videos import VIDEO_FIELDS, nested_video_fields
from readmodel.pipeline import Pipeline
from readmodel.stages import AttachOne, AttachOwner, Match, Project, Sort


def watch_history(user_id: str) -> Pipeline:
    """Published videos the user watched, most recently watched first"""
    return Pipeline("watch_history", WatchHistoryEntry, ("id", "user_id", "video_id", "watched_at")).extend(
        Match.equals("user_id", user_id),
        AttachOne("video", "video_id", Video, VIDEO_FIELDS + ("owner_id",), required=True),
        Match.is_true("video__is_published"),
        AttachOwner("video__owner_details", "video__owner_id"),
        Sort("watched_at", "desc"),
        Project("watched_at", *nested_video_fields("video")),
    )
