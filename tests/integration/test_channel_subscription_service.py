"""Tests for channel profiles, subscription toggles, subscription lists and watch history"""
import pytest

from core.errors import Conflict, DataAccessFailure, InvalidIdentifier, NotFound, ValidationFailed
from core.models import Subscription
from service.channel_service import get_channel_profile, get_watch_history
from service.subscription_service import (
    list_channel_subscribers,
    list_subscribed_channels,
    toggle_subscription,
)
from service.video_service import get_video


class TestChannelProfile:

    def test_channel_without_subscribers(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")

        for viewer in (None, alice.id, bob.id):
            profile = get_channel_profile("alice", viewer, store=store)
            assert profile.subscribers_count == 0
            assert profile.is_subscribed is False

    def test_counts_and_flag(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        carol = make.user("carol")
        make.subscribe(bob, alice)
        make.subscribe(carol, alice)
        make.subscribe(alice, carol)

        profile = get_channel_profile("ALICE", bob.id, store=store)

        assert profile.id == alice.id
        assert profile.subscribers_count == 2
        assert profile.channels_subscribed_to_count == 1
        assert profile.is_subscribed is True
        assert get_channel_profile("alice", store=store).is_subscribed is False

    def test_credentials_never_exposed(self, store, make):
        make.user("alice")
        data = get_channel_profile("alice", store=store).model_dump()
        assert "password_hash" not in data
        assert "refresh_token" not in data

    def test_unknown_and_blank_username(self, store):
        with pytest.raises(NotFound):
            get_channel_profile("nobody", store=store)
        with pytest.raises(ValidationFailed):
            get_channel_profile("   ", store=store)


class TestSubscriptionToggle:

    def test_toggle_twice(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")

        assert toggle_subscription(alice.id, bob.id, store=store).active is True
        assert store.count(Subscription, channel_id=alice.id) == 1
        assert toggle_subscription(alice.id, bob.id, store=store).active is False
        assert store.count(Subscription, channel_id=alice.id) == 0

    def test_self_subscription_forbidden(self, store, make):
        alice = make.user("alice")
        with pytest.raises(ValidationFailed):
            toggle_subscription(alice.id, alice.id, store=store)

    def test_self_subscription_rejected_by_schema(self, store, make):
        """CHECK failures are data errors; Conflict is for duplicates only"""
        alice = make.user("alice")
        with pytest.raises(DataAccessFailure):
            store.create(Subscription(subscriber_id=alice.id, channel_id=alice.id))
        store.rollback()
        assert store.count(Subscription) == 0

    def test_duplicate_subscription_rejected_by_store(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        make.subscribe(bob, alice)

        with pytest.raises(Conflict):
            store.create(Subscription(subscriber_id=bob.id, channel_id=alice.id))
        store.rollback()
        assert store.count(Subscription, channel_id=alice.id) == 1

    def test_toggle_treats_lost_race_as_subscribed(self, store, make, monkeypatch):
        """Insert conflict means another request subscribed first"""
        alice = make.user("alice")
        bob = make.user("bob")
        make.subscribe(bob, alice)

        monkeypatch.setattr(store, "find_one", lambda *args, **kwargs: None)
        result = toggle_subscription(alice.id, bob.id, store=store)

        assert result.active is True
        assert store.count(Subscription, channel_id=alice.id) == 1

    def test_unknown_viewer_cannot_subscribe(self, store, make, missing_id):
        alice = make.user("alice")
        with pytest.raises(NotFound):
            toggle_subscription(alice.id, missing_id, store=store)
        assert store.count(Subscription) == 0

    def test_missing_channel(self, store, make, missing_id):
        bob = make.user("bob")
        with pytest.raises(NotFound):
            toggle_subscription(missing_id, bob.id, store=store)


class TestSubscriberLists:

    def test_subscribers_with_per_row_counts(self, store, make):
        """Each subscriber's count is their own, and subscribed-back is per row"""
        alice = make.user("alice")
        bob = make.user("bob")
        carol = make.user("carol")
        dave = make.user("dave")
        make.subscribe(bob, alice, minute=1)
        make.subscribe(carol, alice, minute=2)
        make.subscribe(dave, bob, minute=3)
        make.subscribe(alice, bob, minute=4)

        rows = list_channel_subscribers(alice.id, store=store)

        assert [r.subscriber.username for r in rows] == ["carol", "bob"]
        by_name = {r.subscriber.username: r.subscriber for r in rows}
        assert by_name["bob"].subscribers_count == 2
        assert by_name["bob"].subscribed_to_subscriber is True
        assert by_name["carol"].subscribers_count == 0
        assert by_name["carol"].subscribed_to_subscriber is False

    def test_subscribed_channels_with_latest_published_video(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        carol = make.user("carol")
        make.video(alice, "Old", minute=1)
        make.video(alice, "New", minute=2)
        make.video(alice, "Unreleased", minute=3, is_published=False)
        make.subscribe(carol, alice, minute=1)
        make.subscribe(carol, bob, minute=2)

        rows = list_subscribed_channels(carol.id, store=store)

        assert [r.channel.username for r in rows] == ["bob", "alice"]
        assert rows[0].channel.latest_video is None
        assert rows[1].channel.latest_video.title == "New"
        assert rows[1].channel.subscribers_count == 1

    def test_empty_lists(self, store, make):
        alice = make.user("alice")
        assert list_channel_subscribers(alice.id, store=store) == []
        assert list_subscribed_channels(alice.id, store=store) == []

    def test_invalid_and_missing_ids(self, store, missing_id):
        with pytest.raises(InvalidIdentifier):
            list_channel_subscribers("123", store=store)
        with pytest.raises(NotFound):
            list_subscribed_channels(missing_id, store=store)


class TestWatchHistory:

    def test_unpublished_videos_dropped(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice, "Soon hidden")
        get_video(video.id, bob.id, store=store)
        video.is_published = False
        store.commit()

        assert get_watch_history(bob.id, store=store) == []

    def test_requires_viewer(self, store):
        with pytest.raises(InvalidIdentifier):
            get_watch_history(None, store=store)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
