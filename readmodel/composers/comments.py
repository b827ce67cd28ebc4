from typing import Optional

from core.models import Comment, Like
from readmodel.pipeline import Pipeline
from readmodel.stages import AttachOwner, AttachRelatedCount, AttachViewerFlag, Match, Project, Sort

COMMENT_FIELDS = ("id", "content", "created_at", "updated_at")


def comment_feed(video_id: str, viewer_id: Optional[str], sort_direction: str = "desc") -> Pipeline:
    return Pipeline("comment_feed", Comment, COMMENT_FIELDS + ("owner_id", "video_id")).extend(
        Match.equals("video_id", video_id),
        AttachOwner("owner", "owner_id"),
        AttachRelatedCount("likes_count", Like, "comment_id"),
        AttachViewerFlag("is_liked", Like, "comment_id", "liked_by_id", viewer_id),
        Sort("created_at", sort_direction),
        Project(*COMMENT_FIELDS, "likes_count", "is_liked", "owner"),
    )
