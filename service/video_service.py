"""Video feed, video detail and the owner-side video writes"""
import logging
import time
from typing import Optional

from sqlalchemy import select

from core.db import utcnow
from core.errors import Conflict, NotFound, ValidationFailed
from core.models import Comment, Like, PlaylistVideo, Video, WatchHistoryEntry
from core.store import Store
from readmodel.composers.videos import VIDEO_SORT_FIELDS, video_detail, video_feed
from readmodel.identity import resolve_id, resolve_optional_id
from readmodel.paginator import paginate
from readmodel.shaper import shape_row
from service.dto import (
    Page,
    PublishVideoRequest,
    UpdateVideoRequest,
    VideoBase,
    VideoDetail,
    VideoListQuery,
    VideoSummary,
    page_of,
)
from service.guards import check_sort_direction, ensure_owner, require_entity, require_viewer, require_viewer_account

logger = logging.getLogger(__name__)


def list_videos(
    query: VideoListQuery,
    viewer_id: Optional[str] = None,
    *,
    store: Store,
    trace_id: str = "internal"
) -> Page[VideoSummary]:
    """
    Public feed of published videos.

    Args:
        query: Paging, search, sort and owner filter
        viewer_id: Authenticated caller, if any
        store: Request-scoped store
        trace_id: Request tracing ID

    Returns:
        Page[VideoSummary]: One page of videos with owner summaries

    Raises:
        InvalidIdentifier: owner filter is malformed
        ValidationFailed: unknown sort field or direction
    """
    start_time = time.time()
    viewer_id = resolve_optional_id(viewer_id, "viewer_id")
    owner_id = resolve_optional_id(query.owner_id, "owner_id")
    if query.sort_field not in VIDEO_SORT_FIELDS:
        raise ValidationFailed(f"sort_field must be one of {VIDEO_SORT_FIELDS}")
    direction = check_sort_direction(query.sort_direction)
    search = query.search.strip() if query.search else None

    pipeline = video_feed(
        search=search or None,
        owner_id=owner_id,
        sort_field=query.sort_field,
        sort_direction=direction,
    )
    page = page_of(VideoSummary, paginate(store, pipeline, query.page, query.limit))

    logger.info("Video feed served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "page": page.current_page,
        "rows": len(page.items),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return page


def record_watch(store: Store, user_id: str, video_id: str) -> None:
    """Put a video at the front of the user's history; one entry per video"""
    entry = store.find_one(WatchHistoryEntry, user_id=user_id, video_id=video_id)
    if entry is None:
        try:
            store.create(WatchHistoryEntry(user_id=user_id, video_id=video_id))
            return
        except Conflict:
            # concurrent view of the same video by the same user
            entry = store.find_one(WatchHistoryEntry, user_id=user_id, video_id=video_id)
            if entry is None:
                raise
    store.update_by_id(WatchHistoryEntry, entry.id, {"watched_at": utcnow()})


def get_video(
    video_id: str,
    viewer_id: Optional[str] = None,
    *,
    store: Store,
    trace_id: str = "internal"
) -> VideoDetail:
    """
    Video detail. Side effects: views += 1 and, for a signed-in viewer, a
    watch-history entry.

    Raises:
        InvalidIdentifier: malformed video or viewer id
        NotFound: no such video, or a viewer id that matches no user
    """
    start_time = time.time()
    video_id = resolve_id(video_id, "video_id")
    viewer_id = resolve_optional_id(viewer_id, "viewer_id")
    if viewer_id is not None:
        require_viewer_account(store, viewer_id)

    if not store.increment(Video, video_id, "views"):
        raise NotFound("Video not found")
    if viewer_id is not None:
        record_watch(store, viewer_id, video_id)

    pipeline = video_detail(video_id, viewer_id)
    rows = store.run_pipeline(pipeline)
    if not rows:
        store.rollback()
        raise NotFound("Video not found")
    store.commit()

    logger.info("Video detail served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return VideoDetail.model_validate(shape_row(rows[0]))


def publish_video(
    dto: PublishVideoRequest,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> VideoBase:
    viewer_id = require_viewer(viewer_id)
    require_viewer_account(store, viewer_id)
    video = store.create(Video(
        owner_id=viewer_id,
        title=dto.title,
        description=dto.description,
        video_file=dto.video_file,
        thumbnail=dto.thumbnail,
        duration=dto.duration,
    ))
    store.commit()

    logger.info("Video published", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return VideoBase.model_validate(video, from_attributes=True)


def update_video(
    video_id: str,
    dto: UpdateVideoRequest,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> VideoBase:
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)
    patch = dto.model_dump(exclude_none=True)
    if not patch:
        raise ValidationFailed("At least one field to update is required")

    video = require_entity(store, Video, video_id, "Video")
    ensure_owner(video.owner_id, viewer_id, "video")

    patch["updated_at"] = utcnow()
    store.update_by_id(Video, video_id, patch)
    store.commit()

    logger.info("Video updated", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return VideoBase.model_validate(require_entity(store, Video, video_id, "Video"), from_attributes=True)


def toggle_publish_status(
    video_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> bool:
    """Flip is_published; returns the new value"""
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)

    video = require_entity(store, Video, video_id, "Video")
    ensure_owner(video.owner_id, viewer_id, "video")

    published = not video.is_published
    store.update_by_id(Video, video_id, {"is_published": published, "updated_at": utcnow()})
    store.commit()

    logger.info("Video publish status changed", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return published


def delete_video(
    video_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> None:
    """Delete a video with its likes, comments (and their likes), playlist entries and history"""
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)

    video = require_entity(store, Video, video_id, "Video")
    ensure_owner(video.owner_id, viewer_id, "video")

    comment_ids = select(Comment.id).where(Comment.video_id == video_id)
    store.delete_many(Like, Like.comment_id.in_(comment_ids))
    store.delete_many(Like, video_id=video_id)
    store.delete_many(Comment, video_id=video_id)
    store.delete_many(PlaylistVideo, video_id=video_id)
    store.delete_many(WatchHistoryEntry, video_id=video_id)
    store.delete_by_id(Video, video_id)
    store.commit()

    logger.info("Video deleted", extra={"trace_id": trace_id, "viewer_id": viewer_id})
