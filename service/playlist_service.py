"""Playlists: owner-only detail view, per-user listing and playlist writes"""
import logging
import time
from typing import List, Optional

from sqlalchemy import func, select

from core.db import utcnow
from core.errors import Conflict, NotFound, ValidationFailed
from core.models import Playlist, PlaylistVideo, User, Video
from core.store import Store
from readmodel.composers.playlists import playlist_header, playlist_videos, user_playlists
from readmodel.identity import resolve_id
from readmodel.shaper import shape_row, shape_rows
from service.dto import PlaylistDetail, PlaylistRequest, PlaylistSummary
from service.guards import ensure_owner, require_entity, require_viewer, require_viewer_account

logger = logging.getLogger(__name__)


def _owned_playlist(store: Store, playlist_id: str, viewer_id: str) -> None:
    """Ownership check on (id, owner_id) only"""
    playlist = store.find_fields(Playlist, playlist_id, "id", "owner_id")
    if playlist is None:
        raise NotFound("Playlist not found")
    ensure_owner(playlist["owner_id"], viewer_id, "playlist")


def get_playlist_detail(
    playlist_id: str,
    viewer_id: Optional[str],
    *,
    store: Store,
    trace_id: str = "internal"
) -> PlaylistDetail:
    """
    Owner-only playlist view: header, owner summary, totals and the published
    videos in insertion order.

    Args:
        playlist_id: Playlist to load
        viewer_id: Authenticated caller; must own the playlist
        store: Request-scoped store
        trace_id: Request tracing ID

    Returns:
        PlaylistDetail: Playlist with its videos

    Raises:
        InvalidIdentifier: malformed playlist or viewer id
        NotFound: no such playlist
        Forbidden: playlist belongs to someone else
    """
    start_time = time.time()
    playlist_id = resolve_id(playlist_id, "playlist_id")
    viewer_id = require_viewer(viewer_id)

    _owned_playlist(store, playlist_id, viewer_id)

    header = playlist_header(playlist_id)
    rows = store.run_pipeline(header)
    if not rows:
        raise NotFound("Playlist not found")
    detail = shape_row(rows[0])

    entries = playlist_videos(playlist_id)
    detail["videos"] = shape_rows(store.run_pipeline(entries))

    logger.info("Playlist detail served", extra={
        "trace_id": trace_id,
        "viewer_id": viewer_id,
        "pipeline": header.name,
        "rows": len(detail["videos"]),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return PlaylistDetail.model_validate(detail)


def list_user_playlists(
    user_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> List[PlaylistSummary]:
    """A user's playlists, most recently updated first; empty when there are none"""
    start_time = time.time()
    user_id = resolve_id(user_id, "user_id")
    require_entity(store, User, user_id, "User")

    pipeline = user_playlists(user_id)
    playlists = [PlaylistSummary.model_validate(row) for row in shape_rows(store.run_pipeline(pipeline))]

    logger.info("User playlists served", extra={
        "trace_id": trace_id,
        "pipeline": pipeline.name,
        "rows": len(playlists),
        "latency_ms": int((time.time() - start_time) * 1000),
    })
    return playlists


def _check_name(dto: PlaylistRequest) -> None:
    if not dto.name.strip():
        raise ValidationFailed("Playlist name is required")


def _summary(store: Store, playlist_id: str) -> PlaylistSummary:
    rows = store.run_pipeline(playlist_header(playlist_id))
    if not rows:
        raise NotFound("Playlist not found")
    return PlaylistSummary.model_validate(shape_row(rows[0]))


def create_playlist(
    dto: PlaylistRequest,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> PlaylistSummary:
    viewer_id = require_viewer(viewer_id)
    _check_name(dto)
    require_viewer_account(store, viewer_id)
    playlist = store.create(Playlist(owner_id=viewer_id, name=dto.name, description=dto.description))
    store.commit()

    logger.info("Playlist created", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return _summary(store, playlist.id)


def update_playlist(
    playlist_id: str,
    dto: PlaylistRequest,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> PlaylistSummary:
    playlist_id = resolve_id(playlist_id, "playlist_id")
    viewer_id = require_viewer(viewer_id)
    _check_name(dto)
    _owned_playlist(store, playlist_id, viewer_id)

    store.update_by_id(Playlist, playlist_id, {
        "name": dto.name,
        "description": dto.description,
        "updated_at": utcnow(),
    })
    store.commit()

    logger.info("Playlist updated", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return _summary(store, playlist_id)


def delete_playlist(
    playlist_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> None:
    playlist_id = resolve_id(playlist_id, "playlist_id")
    viewer_id = require_viewer(viewer_id)
    _owned_playlist(store, playlist_id, viewer_id)

    store.delete_many(PlaylistVideo, playlist_id=playlist_id)
    store.delete_by_id(Playlist, playlist_id)
    store.commit()

    logger.info("Playlist deleted", extra={"trace_id": trace_id, "viewer_id": viewer_id})


def add_video_to_playlist(
    playlist_id: str,
    video_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> bool:
    """
    Append a video to an own playlist.

    Returns:
        bool: False when the video was already in the playlist

    Raises:
        InvalidIdentifier: malformed playlist, video or viewer id
        NotFound: no such playlist or video
        Forbidden: playlist belongs to someone else
    """
    playlist_id = resolve_id(playlist_id, "playlist_id")
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)
    _owned_playlist(store, playlist_id, viewer_id)
    require_entity(store, Video, video_id, "Video")

    if store.find_one(PlaylistVideo, playlist_id=playlist_id, video_id=video_id) is not None:
        return False

    position = store.scalar(
        select(func.coalesce(func.max(PlaylistVideo.position) + 1, 0))
        .where(PlaylistVideo.playlist_id == playlist_id)
    )
    try:
        store.create(PlaylistVideo(playlist_id=playlist_id, video_id=video_id, position=int(position)))
    except Conflict:
        return False
    store.update_by_id(Playlist, playlist_id, {"updated_at": utcnow()})
    store.commit()

    logger.info("Video added to playlist", extra={"trace_id": trace_id, "viewer_id": viewer_id})
    return True


def remove_video_from_playlist(
    playlist_id: str,
    video_id: str,
    viewer_id: str,
    *,
    store: Store,
    trace_id: str = "internal"
) -> None:
    playlist_id = resolve_id(playlist_id, "playlist_id")
    video_id = resolve_id(video_id, "video_id")
    viewer_id = require_viewer(viewer_id)
    _owned_playlist(store, playlist_id, viewer_id)

    if not store.delete_many(PlaylistVideo, playlist_id=playlist_id, video_id=video_id):
        raise NotFound("Video is not in this playlist")
    store.update_by_id(Playlist, playlist_id, {"updated_at": utcnow()})
    store.commit()

    logger.info("Video removed from playlist", extra={"trace_id": trace_id, "viewer_id": viewer_id})
