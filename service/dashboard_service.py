"""Channel owner dashboard"""
import logging
import time
from typing import List

from core.errors import NotFound
from core.store import Store
from readmodel.composers.dashboard import channel_stats, channel_videos
from readmodel.shaper import shape_row, shape_rows
from service.dto import ChannelStats, ChannelVideo
from service.guards import require_viewer

logger = logging.getLogger(__name__)


def get_channel_stats(
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> ChannelStats:
    """Totals over the viewer's own channel: subscribers, videos, views, video likes"""
    start_time = time.time()
    viewer_id = require_viewer(viewer_id)

    pipeline = channel_stats(viewer_id)
    rows = store.run_pipeline(pipeline)
    if not rows:
        raise NotFound("Channel does not exist")

    logger.info("Channel stats served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return ChannelStats.model_validate(shape_row(rows[0]))


def get_channel_videos(
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> List[ChannelVideo]:
    start_time = time.time()
    viewer_id = require_viewer(viewer_id)

    pipeline = channel_videos(viewer_id)
    videos = [ChannelVideo.model_validate(row) for row in shape_rows(store.run_pipeline(pipeline))]

    logger.info("Channel videos served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": pipeline.name,
        "rows": len(videos),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return videos
