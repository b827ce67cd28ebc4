"""Video feed, video detail and video writes"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response

from app.deps.common import get_page_params, get_store, get_trace_id, get_viewer_id, require_viewer_id
from core.store import Store
from service.dto import (
    Page,
    PublishVideoRequest,
    UpdateVideoRequest,
    VideoBase,
    VideoDetail,
    VideoListQuery,
    VideoSummary,
)
from service.video_service import (
    delete_video,
    get_video,
    list_videos,
    publish_video,
    toggle_publish_status,
    update_video,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["videos"])


@router.get("/videos", response_model=Page[VideoSummary])
def video_feed(
    search: Optional[str] = None,
    sort_field: str = "created_at",
    sort_direction: str = "desc",
    owner_id: Optional[str] = None,
    paging: dict = Depends(get_page_params),
    viewer_id: Optional[str] = Depends(get_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> Page[VideoSummary]:
    """Published videos, searchable by title, optionally filtered by owner"""
    logger.info("Video feed request received", extra={"trace_id": trace_id, "viewer_id": viewer_id})

    query = VideoListQuery(
        search=search,
        sort_field=sort_field,
        sort_direction=sort_direction,
        owner_id=owner_id,
        **paging
    )
    return list_videos(query, viewer_id, store=store, trace_id=trace_id)


@router.post("/videos", response_model=VideoBase, status_code=201)
def publish(
    request: PublishVideoRequest,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> VideoBase:
    return publish_video(request, viewer_id, store=store, trace_id=trace_id)


@router.get("/videos/{video_id}", response_model=VideoDetail)
def video_detail(
    video_id: str,
    viewer_id: Optional[str] = Depends(get_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> VideoDetail:
    """Video detail; counts a view and records history for signed-in viewers"""
    logger.info("Video detail request received", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return get_video(video_id, viewer_id, store=store, trace_id=trace_id)


@router.patch("/videos/{video_id}", response_model=VideoBase)
def update(
    video_id: str,
    request: UpdateVideoRequest,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> VideoBase:
    return update_video(video_id, request, viewer_id, store=store, trace_id=trace_id)


@router.patch("/videos/{video_id}/publish")
def toggle_publish(
    video_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> dict:
    published = toggle_publish_status(video_id, viewer_id, store=store, trace_id=trace_id)
    return {"is_published": published}


@router.delete("/videos/{video_id}", status_code=204)
def delete(
    video_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> Response:
    delete_video(video_id, viewer_id, store=store, trace_id=trace_id)
    return Response(status_code=204)
