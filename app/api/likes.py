"""Likes on videos and comments"""
from typing import List

from fastapi import APIRouter, Depends

from app.deps.common import get_store, get_trace_id, require_viewer_id
from core.store import Store
from service.dto import LikedVideo, ToggleResponseDTO
from service.like_service import list_liked_videos, toggle_comment_like, toggle_video_like

router = APIRouter(prefix="/likes", tags=["likes"])


@router.get("/videos", response_model=List[LikedVideo])
def liked_videos(
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> List[LikedVideo]:
    return list_liked_videos(viewer_id, store=store, trace_id=trace_id)


@router.post("/videos/{video_id}", response_model=ToggleResponseDTO)
def toggle_video(
    video_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> ToggleResponseDTO:
    return toggle_video_like(video_id, viewer_id, store=store, trace_id=trace_id)


@router.post("/comments/{comment_id}", response_model=ToggleResponseDTO)
def toggle_comment(
    comment_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> ToggleResponseDTO:
    return toggle_comment_like(comment_id, viewer_id, store=store, trace_id=trace_id)
