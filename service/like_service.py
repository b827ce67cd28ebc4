"""Like toggles and the liked-videos list"""
import logging
import time
from typing import List

from core.errors import Conflict
from core.models import Comment, Like, Video
from core.store import Store
from readmodel.composers.likes import liked_videos
from readmodel.identity import resolve_id
from readmodel.shaper import shape_rows
from service.dto import LikedVideo, ToggleResponseDTO
from service.guards import require_entity, require_viewer, require_viewer_account

logger = logging.getLogger(__name__)


def _toggle(store: Store, viewer_id: str, **target) -> bool:
    """Remove the like if present, otherwise add it. Returns the new state."""
    existing = store.find_one(Like, liked_by_id=viewer_id, **target)
    if existing is not None:
        store.delete_by_id(Like, existing.id)
        store.commit()
        return False

    try:
        store.create(Like(liked_by_id=viewer_id, **target))
    except Conflict:
        # a concurrent request already liked it; that is the target state
        return True
    store.commit()
    return True


def toggle_video_like(
    video_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> ToggleResponseDTO:
    """
    Like or unlike a video.

    Raises:
        InvalidIdentifier: malformed video or viewer id
        NotFound: no such video, or no user for the viewer id
    """
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)
    require_entity(store, Video, video_id, "Video")
    require_viewer_account(store, viewer_id)

    active = _toggle(store, viewer_id, video_id=video_id)

    logger.info("Video like toggled", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return ToggleResponseDTO(
        active=active,
        message="Video liked" if active else "Video unliked"
    )


def toggle_comment_like(
    comment_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> ToggleResponseDTO:
    comment_id = resolve_id(comment_id, "comment_id")
    viewer_id = require_viewer(viewer_id)
    require_entity(store, Comment, comment_id, "Comment")
    require_viewer_account(store, viewer_id)

    active = _toggle(store, viewer_id, comment_id=comment_id)

    logger.info("Comment like toggled", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return ToggleResponseDTO(
        active=active,
        message="Comment liked" if active else "Comment unliked"
    )


def list_liked_videos(
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> List[LikedVideo]:
    """Published videos the viewer liked, newest like first; empty when there are none"""
    start_time = time.time()
    viewer_id = require_viewer(viewer_id)

    pipeline = liked_videos(viewer_id)
    items = [LikedVideo.model_validate(row) for row in shape_rows(store.run_pipeline(pipeline))]

    logger.info("Liked videos served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "rows": len(items),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return items
