"""Channel profile"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.deps.common import get_store, get_trace_id, get_viewer_id
from core.store import Store
from service.channel_service import get_channel_profile
from service.dto import ChannelProfile

logger = logging.getLogger(__name__)
router = APIRouter(tags=["channels"])


@router.get("/channels/{username}", response_model=ChannelProfile)
def channel_profile(
    username: str,
    viewer_id: Optional[str] = Depends(get_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> ChannelProfile:
    logger.info("Channel profile request received", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return get_channel_profile(username, viewer_id, store=store, trace_id=trace_id)
