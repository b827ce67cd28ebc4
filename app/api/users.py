"""The signed-in user's own views"""
from typing import List

from fastapi import APIRouter, Depends

from app.deps.common import get_store, get_trace_id, require_viewer_id
from core.store import Store
from service.channel_service import get_watch_history
from service.dto import HistoryEntry

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/history", response_model=List[HistoryEntry])
def watch_history(
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> List[HistoryEntry]:
    return get_watch_history(viewer_id, store=store, trace_id=trace_id)
