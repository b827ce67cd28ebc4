"""Comments of a video"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response

from app.deps.common import get_page_params, get_store, get_trace_id, get_viewer_id, require_viewer_id
from core.store import Store
from service.comment_service import add_comment, delete_comment, list_comments, update_comment
from service.dto import CommentDTO, CommentRequest, CommentSummary, Page

logger = logging.getLogger(__name__)
router = APIRouter(tags=["comments"])


@router.get("/videos/{video_id}/comments", response_model=Page[CommentSummary])
def comment_feed(
    video_id: str,
    sort_direction: str = "desc",
    paging: dict = Depends(get_page_params),
    viewer_id: Optional[str] = Depends(get_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> Page[CommentSummary]:
    logger.info("Comment feed request received", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return list_comments(
        video_id,
        paging["page"],
        paging["limit"],
        sort_direction,
        viewer_id,
        store=store,
        trace_id=trace_id
    )


@router.post("/videos/{video_id}/comments", response_model=CommentDTO, status_code=201)
def comment(
    video_id: str,
    request: CommentRequest,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> CommentDTO:
    return add_comment(video_id, request, viewer_id, store=store, trace_id=trace_id)


@router.patch("/comments/{comment_id}", response_model=CommentDTO)
def edit(
    comment_id: str,
    request: CommentRequest,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> CommentDTO:
    return update_comment(comment_id, request, viewer_id, store=store, trace_id=trace_id)


@router.delete("/comments/{comment_id}", status_code=204)
def remove(
    comment_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> Response:
    delete_comment(comment_id, viewer_id, store=store, trace_id=trace_id)
    return Response(status_code=204)
