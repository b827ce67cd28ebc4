"""Common test fixtures for all test modules"""
from datetime import datetime, timedelta, timezone

import pytest

from core.config import AppSettings
from core.db import Base, create_db_engine, create_session_factory
from core.models import Comment, Like, Playlist, PlaylistVideo, Subscription, User, Video
from core.store import Store

BASE_TIME = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """Deterministic timestamps, BASE_TIME + minutes"""
    return BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture
def settings():
    """In-memory SQLite, one database per test"""
    return AppSettings(database_url="sqlite://", log_level="WARNING")


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = create_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def store(session):
    return Store(session)


class Factory:
    """Row builders for test data; every helper commits"""

    def __init__(self, store: Store):
        self.store = store

    def _save(self, entity):
        self.store.create(entity)
        self.store.commit()
        return entity

    def user(self, username: str, **kwargs) -> User:
        return self._save(User(
            username=username,
            email=kwargs.pop("email", f"{username}@example.com"),
            full_name=kwargs.pop("full_name", username.title()),
            avatar=kwargs.pop("avatar", f"https://media.example.com/{username}.png"),
            password_hash=kwargs.pop("password_hash", "$2b$10$hash"),
            refresh_token=kwargs.pop("refresh_token", "refresh-token"),
            **kwargs
        ))

    def video(self, owner: User, title: str = "Video", minute: int = 0, **kwargs) -> Video:
        return self._save(Video(
            owner_id=owner.id,
            title=title,
            description=kwargs.pop("description", f"About {title}"),
            video_file=kwargs.pop("video_file", "https://media.example.com/v.mp4"),
            thumbnail=kwargs.pop("thumbnail", "https://media.example.com/t.png"),
            duration=kwargs.pop("duration", 60.0),
            created_at=kwargs.pop("created_at", at(minute)),
            updated_at=kwargs.pop("updated_at", at(minute)),
            **kwargs
        ))

    def comment(self, owner: User, video: Video, content: str = "Nice", minute: int = 0) -> Comment:
        return self._save(Comment(
            owner_id=owner.id,
            video_id=video.id,
            content=content,
            created_at=at(minute),
            updated_at=at(minute),
        ))

    def like_video(self, user: User, video: Video, minute: int = 0) -> Like:
        return self._save(Like(liked_by_id=user.id, video_id=video.id, created_at=at(minute)))

    def like_comment(self, user: User, comment: Comment) -> Like:
        return self._save(Like(liked_by_id=user.id, comment_id=comment.id))

    def subscribe(self, subscriber: User, channel: User, minute: int = 0) -> Subscription:
        return self._save(Subscription(
            subscriber_id=subscriber.id, channel_id=channel.id, created_at=at(minute)
        ))

    def playlist(self, owner: User, name: str = "Favourites", *videos: Video) -> Playlist:
        playlist = self._save(Playlist(owner_id=owner.id, name=name, description=f"{name} list"))
        for position, video in enumerate(videos):
            self._save(PlaylistVideo(playlist_id=playlist.id, video_id=video.id, position=position))
        return playlist


@pytest.fixture
def make(store):
    return Factory(store)


@pytest.fixture
def missing_id():
    """Well-formed id that matches no row"""
    return "0123456789abcdef01234567"


@pytest.fixture
def factory():
    """Factory class, for tests that bring their own store"""
    return Factory
