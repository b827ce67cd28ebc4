"""Playlist pipelines; aggregates cover published videos only"""
from typing import Any, Mapping, Tuple

from sqlalchemy import BigInteger, cast, func, select
from sqlalchemy.orm import aliased

from core.models import Playlist, PlaylistVideo, Video
from readmodel.composers.videos import VIDEO_FIELDS, nested_video_fields
from readmodel.pipeline import Pipeline
from readmodel.stages import AttachOne, AttachOwner, Derive, Match, Project, Sort

PLAYLIST_FIELDS = ("id", "name", "description", "created_at", "updated_at")


def _published_entries(aggregate, playlist_id: Any):
    entry = aliased(PlaylistVideo)
    video = aliased(Video)
    return (
        select(aggregate(video))
        .select_from(entry)
        .join(video, video.id == entry.video_id)
        .where(entry.playlist_id == playlist_id, video.is_published.is_(True))
        .correlate_except(entry, video)
        .scalar_subquery()
    )


def _total_videos(fields: Mapping[str, Any]):
    return _published_entries(lambda video: func.count(video.id), fields["id"])


def _total_views(fields: Mapping[str, Any]):
    return _published_entries(
        lambda video: cast(func.coalesce(func.sum(video.views), 0), BigInteger),
        fields["id"]
    )


def playlist_totals() -> Tuple[Derive, Derive]:
    return (
        Derive("total_videos", _total_videos, {"id"}),
        Derive("total_views", _total_views, {"id"}),
    )


def playlist_header(playlist_id: str) -> Pipeline:
    return Pipeline("playlist_header", Playlist, PLAYLIST_FIELDS + ("owner_id",)).extend(
        Match.equals("id", playlist_id),
        AttachOwner("owner", "owner_id"),
        *playlist_totals(),
        Project(*PLAYLIST_FIELDS, "total_videos", "total_views", "owner"),
    )


def playlist_videos(playlist_id: str) -> Pipeline:
    """Published videos of a playlist in insertion order"""
    return Pipeline(
        "playlist_videos", PlaylistVideo, ("id", "playlist_id", "video_id", "position", "added_at")
    ).extend(
        Match.equals("playlist_id", playlist_id),
        AttachOne("video", "video_id", Video, VIDEO_FIELDS + ("owner_id",), required=True),
        Match.is_true("video__is_published"),
        AttachOwner("video__owner_details", "video__owner_id"),
        Sort("position", "asc"),
        Project("position", "added_at", *nested_video_fields("video")),
    )


def user_playlists(user_id: str) -> Pipeline:
    return Pipeline("user_playlists", Playlist, PLAYLIST_FIELDS + ("owner_id",)).extend(
        Match.equals("owner_id", user_id),
        *playlist_totals(),
        Sort("updated_at", "desc"),
        Project(*PLAYLIST_FIELDS, "total_videos", "total_views"),
    )
