"""Subscription toggle and subscription lists"""
import logging
import time
from typing import List

from core.errors import Conflict, ValidationFailed
from core.models import Subscription, User
from core.store import Store
from readmodel.composers.channels import channel_subscribers, subscribed_channels
from readmodel.identity import resolve_id
from readmodel.shaper import shape_rows
from service.dto import SubscribedChannelRow, SubscriberRow, ToggleResponseDTO
from service.guards import require_entity, require_viewer, require_viewer_account

logger = logging.getLogger(__name__)


def toggle_subscription(
    channel_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> ToggleResponseDTO:
    """
    Subscribe the viewer to a channel, or unsubscribe if already subscribed.

    Raises:
        InvalidIdentifier: malformed channel or viewer id
        ValidationFailed: viewer and channel are the same user
        NotFound: no such channel, or no user for the viewer id
    """
    channel_id = resolve_id(channel_id, "channel_id")
    viewer_id = require_viewer(viewer_id)
    if channel_id == viewer_id:
        raise ValidationFailed("Cannot subscribe to your own channel")
    require_entity(store, User, channel_id, "Channel")
    require_viewer_account(store, viewer_id)

    existing = store.find_one(Subscription, subscriber_id=viewer_id, channel_id=channel_id)
    if existing is not None:
        store.delete_by_id(Subscription, existing.id)
        store.commit()
        active = False
    else:
        try:
            store.create(Subscription(subscriber_id=viewer_id, channel_id=channel_id))
            store.commit()
        except Conflict:
            # concurrent subscribe won the insert
            pass
        active = True

    logger.info("Subscription toggled", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return ToggleResponseDTO(
        active=active,
        message="Subscribed" if active else "Unsubscribed"
    )


def list_channel_subscribers(
    channel_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> List[SubscriberRow]:
    """
    Subscribers of a channel, newest first.

    Each row carries the subscriber's own subscriber count and whether the
    queried channel subscribes back.

    Raises:
        InvalidIdentifier: malformed channel id
        NotFound: no such channel
    """
    start_time = time.time()
    channel_id = resolve_id(channel_id, "channel_id")
    require_entity(store, User, channel_id, "Channel")

    pipeline = channel_subscribers(channel_id)
    rows = [SubscriberRow.model_validate(row) for row in shape_rows(store.run_pipeline(pipeline))]

    logger.info("Channel subscribers served", extra={
        "trace_id": trace_id,
        "pipeline": pipeline.name,
        "rows": len(rows),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return rows


def list_subscribed_channels(
    subscriber_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> List[SubscribedChannelRow]:
    start_time = time.time()
    subscriber_id = resolve_id(subscriber_id, "subscriber_id")
    require_entity(store, User, subscriber_id, "User")

    pipeline = subscribed_channels(subscriber_id)
    rows = [SubscribedChannelRow.model_validate(row) for row in shape_rows(store.run_pipeline(pipeline))]

    logger.info("Subscribed channels served", extra={
        "trace_id": trace_id,
        "pipeline": pipeline.name,
        "rows": len(rows),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return rows
