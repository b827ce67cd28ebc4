"""Subscriptions between users and channels"""
from typing import List

from fastapi import APIRouter, Depends

from app.deps.common import get_store, get_trace_id, require_viewer_id
from core.store import Store
from service.dto import SubscribedChannelRow, SubscriberRow, ToggleResponseDTO
from service.subscription_service import (
    list_channel_subscribers,
    list_subscribed_channels,
    toggle_subscription,
)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/channels/{channel_id}", response_model=ToggleResponseDTO)
def toggle(
    channel_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> ToggleResponseDTO:
    return toggle_subscription(channel_id, viewer_id, store=store, trace_id=trace_id)


@router.get("/channels/{channel_id}/subscribers", response_model=List[SubscriberRow])
def subscribers(
    channel_id: str,
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> List[SubscriberRow]:
    return list_channel_subscribers(channel_id, store=store, trace_id=trace_id)


@router.get("/users/{subscriber_id}/channels", response_model=List[SubscribedChannelRow])
def subscribed(
    subscriber_id: str,
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> List[SubscribedChannelRow]:
    return list_subscribed_channels(subscriber_id, store=store, trace_id=trace_id)
