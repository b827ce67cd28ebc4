"""Playlists"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from app.deps.common import get_store, get_trace_id, require_viewer_id
from core.store import Store
from service.dto import PlaylistDetail, PlaylistRequest, PlaylistSummary
from service.playlist_service import (
    add_video_to_playlist,
    create_playlist,
    delete_playlist,
    get_playlist_detail,
    list_user_playlists,
    remove_video_from_playlist,
    update_playlist,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.post("", response_model=PlaylistSummary, status_code=201)
def create(
    request: PlaylistRequest,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> PlaylistSummary:
    return create_playlist(request, viewer_id, store=store, trace_id=trace_id)


@router.get("/users/{user_id}", response_model=List[PlaylistSummary])
def user_playlists(
    user_id: str,
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> List[PlaylistSummary]:
    return list_user_playlists(user_id, store=store, trace_id=trace_id)


@router.get("/{playlist_id}", response_model=PlaylistDetail)
def playlist_detail(
    playlist_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> PlaylistDetail:
    """Owner-only playlist view with its published videos"""
    logger.info("Playlist detail request received", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return get_playlist_detail(playlist_id, viewer_id, store=store, trace_id=trace_id)


@router.patch("/{playlist_id}", response_model=PlaylistSummary)
def update(
    playlist_id: str,
    request: PlaylistRequest,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> PlaylistSummary:
    return update_playlist(playlist_id, request, viewer_id, store=store, trace_id=trace_id)


@router.delete("/{playlist_id}", status_code=204)
def delete(
    playlist_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> Response:
    delete_playlist(playlist_id, viewer_id, store=store, trace_id=trace_id)
    return Response(status_code=204)


@router.post("/{playlist_id}/videos/{video_id}")
def add_video(
    playlist_id: str,
    video_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> dict:
    added = add_video_to_playlist(playlist_id, video_id, viewer_id, store=store, trace_id=trace_id)
    return {"added": added}


@router.delete("/{playlist_id}/videos/{video_id}", status_code=204)
def remove_video(
    playlist_id: str,
    video_id: str,
    viewer_id: str = Depends(require_viewer_id),
    store: Store = Depends(get_store),
    trace_id: str = Depends(get_trace_id),
) -> Response:
    remove_video_from_playlist(playlist_id, video_id, viewer_id, store=store, trace_id=trace_id)
    return Response(status_code=204)
