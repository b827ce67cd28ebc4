"""Channel owner dashboard"""
from typing import List

from fastapi import APIRouter, Depends

from app.deps.common import get_store, get_trace_id, require_viewer_id
from core.store import Store
from service.dashboard_service import get_channel_stats, get_channel_videos
from service.dto import ChannelStats, ChannelVideo

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ChannelStats)
def stats(
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> ChannelStats:
    return get_channel_stats(viewer_id, store=store, trace_id=trace_id)


@router.get("/videos", response_model=List[ChannelVideo])
def videos(
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> List[ChannelVideo]:
    return get_channel_videos(viewer_id, store=store, trace_id=trace_id)
