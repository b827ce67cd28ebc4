"""Comment feed and comment writes"""
import logging
import time
from typing import Optional

from core.db import utcnow
from core.models import Comment, Like, Video
from core.store import Store
from readmodel.composers.comments import comment_feed
from readmodel.identity import resolve_id, resolve_optional_id
from readmodel.paginator import DEFAULT_LIMIT, DEFAULT_PAGE, paginate
from service.dto import CommentDTO, CommentRequest, CommentSummary, Page, page_of
from service.guards import check_sort_direction, ensure_owner, require_entity, require_viewer, require_viewer_account

logger = logging.getLogger(__name__)


def list_comments(
    video_id: str,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    sort_direction: str = "desc",
    viewer_id: Optional[str] = None,
    *,
    store: Store,
    trace_id: str = "internal"
) -> Page[CommentSummary]:
    """
    Paginated comments of a video, newest first by default.

    Raises:
        InvalidIdentifier: malformed video or viewer id
        ValidationFailed: bad sort direction, page or limit
        NotFound: the video does not exist
    """
    start_time = time.time()
    video_id = resolve_id(video_id, "video_id")
    viewer_id = resolve_optional_id(viewer_id, "viewer_id")
    direction = check_sort_direction(sort_direction)

    require_entity(store, Video, video_id, "Video")

    pipeline = comment_feed(video_id, viewer_id, direction)
    result = page_of(CommentSummary, paginate(store, pipeline, page, limit))

    logger.info("Comment feed served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "page": result.current_page,
        "rows": len(result.items),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return result


def add_comment(
    video_id: str,
    dto: CommentRequest,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> CommentDTO:
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)
    require_entity(store, Video, video_id, "Video")
    require_viewer_account(store, viewer_id)

    comment = store.create(Comment(video_id=video_id, owner_id=viewer_id, content=dto.content))
    store.commit()

    logger.info("Comment added", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return CommentDTO.model_validate(comment, from_attributes=True)


def update_comment(
    comment_id: str,
    dto: CommentRequest,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> CommentDTO:
    comment_id = resolve_id(comment_id, "comment_id")
    viewer_id = require_viewer(viewer_id)

    comment = require_entity(store, Comment, comment_id, "Comment")
    ensure_owner(comment.owner_id, viewer_id, "comment")

    store.update_by_id(Comment, comment_id, {"content": dto.content, "updated_at": utcnow()})
    store.commit()

    logger.info("Comment updated", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return CommentDTO.model_validate(require_entity(store, Comment, comment_id, "Comment"), from_attributes=True)


def delete_comment(
    comment_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> None:
    """Delete an own comment together with every like on it"""
    comment_id = resolve_id(comment_id, "comment_id")
    viewer_id = require_viewer(viewer_id)

    comment = require_entity(store, Comment, comment_id, "Comment")
    ensure_owner(comment.owner_id, viewer_id, "comment")

    store.delete_many(Like, comment_id=comment_id)
    store.delete_by_id(Comment, comment_id)
    store.commit()

    logger.info("Comment deleted", extra={"trace_id": trace_id, "viewer_id": viewer_id})
