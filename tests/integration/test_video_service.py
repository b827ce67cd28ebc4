"""Tests for the video feed, video detail and video writes"""
import pytest

from core.errors import Forbidden, InvalidIdentifier, NotFound, ValidationFailed
from core.models import Comment, Like, PlaylistVideo, Video, WatchHistoryEntry
from service.channel_service import get_watch_history
from service.dto import PublishVideoRequest, UpdateVideoRequest, VideoListQuery
from service.video_service import (
    delete_video,
    get_video,
    list_videos,
    publish_video,
    toggle_publish_status,
    update_video,
)


class TestVideoFeed:
    """Public feed: published only, searchable, owner summaries attached"""

    def test_unpublished_videos_hidden(self, store, make):
        alice = make.user("alice")
        make.video(alice, "Visible", minute=1)
        make.video(alice, "Draft", minute=2, is_published=False)

        page = list_videos(VideoListQuery(), store=store)

        assert [v.title for v in page.items] == ["Visible"]
        assert page.total_items == 1

    def test_owner_summary_has_public_fields_only(self, store, make):
        alice = make.user("alice")
        make.video(alice, "Cats")

        item = list_videos(VideoListQuery(), store=store).items[0]
        owner = item.owner_details.model_dump()

        assert owner == {
            "id": alice.id,
            "username": "alice",
            "full_name": "Alice",
            "avatar": "https://media.example.com/alice.png",
        }

    def test_search_is_case_insensitive_and_literal(self, store, make):
        alice = make.user("alice")
        make.video(alice, "Funny CATS compilation", minute=1)
        make.video(alice, "Dogs", minute=2)
        make.video(alice, "100% dogs", minute=3)

        titles = [v.title for v in list_videos(VideoListQuery(search="cats"), store=store).items]
        assert titles == ["Funny CATS compilation"]

        titles = [v.title for v in list_videos(VideoListQuery(search="0%"), store=store).items]
        assert titles == ["100% dogs"]

    def test_owner_filter_and_sort(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        make.video(alice, "A1", views=5)
        make.video(alice, "A2", views=50)
        make.video(bob, "B1", views=500)

        page = list_videos(
            VideoListQuery(owner_id=alice.id, sort_field="views", sort_direction="desc"),
            store=store
        )
        assert [v.title for v in page.items] == ["A2", "A1"]

    def test_invalid_parameters(self, store):
        with pytest.raises(ValidationFailed):
            list_videos(VideoListQuery(sort_field="password_hash"), store=store)
        with pytest.raises(ValidationFailed):
            list_videos(VideoListQuery(sort_direction="up"), store=store)
        with pytest.raises(InvalidIdentifier):
            list_videos(VideoListQuery(owner_id="nope"), store=store)
        with pytest.raises(ValidationFailed):
            list_videos(VideoListQuery(page=0), store=store)


class TestVideoDetail:
    """Detail view counts views, records history and personalises flags"""

    def test_each_fetch_counts_one_view(self, store, make):
        alice = make.user("alice")
        video = make.video(alice, "Cats")

        get_video(video.id, store=store)
        detail = get_video(video.id, store=store)

        assert detail.views == 2

    def test_viewer_flags_and_counts(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        carol = make.user("carol")
        video = make.video(alice, "Cats")
        make.like_video(bob, video)
        make.like_video(carol, video)
        make.subscribe(bob, alice)

        as_bob = get_video(video.id, bob.id, store=store)
        assert as_bob.likes_count == 2
        assert as_bob.is_liked is True
        assert as_bob.owner.username == "alice"
        assert as_bob.owner.subscribers_count == 1
        assert as_bob.owner.is_subscribed is True

        anonymous = get_video(video.id, store=store)
        assert anonymous.is_liked is False
        assert anonymous.owner.is_subscribed is False

    def test_signed_in_view_recorded_once_per_video(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        first = make.video(alice, "First", minute=1)
        second = make.video(alice, "Second", minute=2)

        get_video(first.id, bob.id, store=store)
        get_video(second.id, bob.id, store=store)
        get_video(first.id, bob.id, store=store)

        history = get_watch_history(bob.id, store=store)
        assert [h.video.title for h in history] == ["First", "Second"]
        assert store.count(WatchHistoryEntry, user_id=bob.id) == 2

    def test_missing_video(self, store, missing_id):
        with pytest.raises(NotFound):
            get_video(missing_id, store=store)

    def test_unknown_viewer_rejected_before_counting(self, store, make, missing_id):
        video = make.video(make.user("alice"))

        with pytest.raises(NotFound, match="User not found"):
            get_video(video.id, missing_id, store=store)
        store.rollback()

        assert store.find_fields(Video, video.id, "views") == {"views": 0}
        assert store.count(WatchHistoryEntry) == 0

    def test_malformed_id_rejected_before_store_access(self, store, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("store must not be called")

        monkeypatch.setattr(store, "increment", fail)
        monkeypatch.setattr(store, "run_pipeline", fail)
        with pytest.raises(InvalidIdentifier):
            get_video("not-a-valid-id", store=store)


class TestVideoWrites:
    """Owner-only writes"""

    def test_publish_and_update(self, store, make):
        alice = make.user("alice")
        created = publish_video(PublishVideoRequest(
            title="Cats",
            description="Cats doing things",
            video_file="https://media.example.com/cats.mp4",
            thumbnail="https://media.example.com/cats.png",
            duration=12.5,
        ), alice.id, store=store)

        assert created.views == 0
        assert created.is_published is True

        updated = update_video(created.id, UpdateVideoRequest(title="More cats"), alice.id, store=store)
        assert updated.title == "More cats"
        assert updated.description == "Cats doing things"

    def test_empty_update_rejected(self, store, make):
        alice = make.user("alice")
        video = make.video(alice)
        with pytest.raises(ValidationFailed):
            update_video(video.id, UpdateVideoRequest(), alice.id, store=store)

    def test_non_owner_forbidden(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)

        with pytest.raises(Forbidden):
            update_video(video.id, UpdateVideoRequest(title="Mine"), bob.id, store=store)
        with pytest.raises(Forbidden):
            toggle_publish_status(video.id, bob.id, store=store)
        with pytest.raises(Forbidden):
            delete_video(video.id, bob.id, store=store)

    def test_toggle_publish(self, store, make):
        alice = make.user("alice")
        video = make.video(alice)

        assert toggle_publish_status(video.id, alice.id, store=store) is False
        assert list_videos(VideoListQuery(), store=store).items == []
        assert toggle_publish_status(video.id, alice.id, store=store) is True

    def test_delete_cascades(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)
        comment = make.comment(bob, video)
        make.like_video(bob, video)
        make.like_comment(alice, comment)
        make.playlist(bob, "Later", video)
        get_video(video.id, bob.id, store=store)

        delete_video(video.id, alice.id, store=store)

        assert store.count(Video) == 0
        assert store.count(Comment) == 0
        assert store.count(Like) == 0
        assert store.count(PlaylistVideo) == 0
        assert store.count(WatchHistoryEntry) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
