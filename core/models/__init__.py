"""Core database models"""
from .users import User
from .videos import Video
from .comments import Comment
from .likes import Like
from .subscriptions import Subscription
from .playlists import Playlist, PlaylistVideo
from .watch_history import WatchHistoryEntry

__all__ = [
    "User",
    "Video",
    "Comment",
    "Like",
    "Subscription",
    "Playlist",
    "PlaylistVideo",
    "WatchHistoryEntry",
]
