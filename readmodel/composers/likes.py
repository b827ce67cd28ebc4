from core.models import Like, Video
from readmodel.composers.videos import VIDEO_FIELDS, nested_video_fields
from readmodel.pipeline import Pipeline
from readmodel.stages import AttachOne, AttachOwner, Derive, Match, Project, Sort


def liked_videos(viewer_id: str) -> Pipeline:
    """Published videos the viewer liked, most recent like first"""
    return Pipeline("liked_videos", Like, ("id", "video_id", "liked_by_id", "created_at")).extend(
        Match.equals("liked_by_id", viewer_id),
        Match.not_null("video_id"),
        AttachOne("video", "video_id", Video, VIDEO_FIELDS + ("owner_id",), required=True),
        Match.is_true("video__is_published"),
        AttachOwner("video__owner_details", "video__owner_id", required=True),
        Derive("liked_at", lambda f: f["created_at"], {"created_at"}),
        Sort("liked_at", "desc"),
        Project("liked_at", *nested_video_fields("video")),
    )
