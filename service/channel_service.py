"""Channel profile and the viewer's own watch history"""
import logging
import time
from typing import List, Optional

from core.errors import NotFound, ValidationFailed
from core.store import Store
from readmodel.composers.channels import channel_profile
from readmodel.composers.history import watch_history
from readmodel.identity import resolve_optional_id
from readmodel.shaper import shape_row, shape_rows
from service.dto import ChannelProfile, HistoryEntry
from service.guards import require_viewer

logger = logging.getLogger(__name__)


def get_channel_profile(
    username: str,
    viewer_id: Optional[str] = None,
    *,
    store: Store,
    trace_id: str = "internal"
) -> ChannelProfile:
    """
    Public profile of a channel looked up by username (case-insensitive).

    Args:
        username: Channel handle
        viewer_id: Authenticated caller, if any; drives is_subscribed
        store: Request-scoped store
        trace_id: Request tracing ID

    Returns:
        ChannelProfile: Profile with subscriber counts; never credentials

    Raises:
        ValidationFailed: blank username
        InvalidIdentifier: malformed viewer id
        NotFound: no channel with that username
    """
    start_time = time.time()
    username = (username or "").strip()
    if not username:
        raise ValidationFailed("username is required")
    viewer_id = resolve_optional_id(viewer_id, "viewer_id")

    pipeline = channel_profile(username, viewer_id)
    rows = store.run_pipeline(pipeline)
    if not rows:
        raise NotFound("Channel does not exist")

    logger.info("Channel profile served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return ChannelProfile.model_validate(shape_row(rows[0]))


def get_watch_history(
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> List[HistoryEntry]:
    start_time = time.time()
    viewer_id = require_viewer(viewer_id)

    pipeline = watch_history(viewer_id)
    entries = [HistoryEntry.model_validate(row) for row in shape_rows(store.run_pipeline(pipeline))]

    logger.info("Watch history served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "rows": len(entries),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return entries
