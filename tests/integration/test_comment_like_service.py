"""Tests for comment feeds, comment writes and like toggles"""
import pytest

from core.errors import Conflict, DataAccessFailure, Forbidden, InvalidIdentifier, NotFound
from core.models import Like
from service.comment_service import add_comment, delete_comment, list_comments, update_comment
from service.dto import CommentRequest
from service.like_service import list_liked_videos, toggle_comment_like, toggle_video_like


class TestCommentFeed:

    def test_comments_with_likes_and_owner(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)
        older = make.comment(bob, video, "first!", minute=1)
        make.comment(alice, video, "thanks", minute=2)
        make.like_comment(alice, older)

        page = list_comments(video.id, viewer_id=alice.id, store=store)

        assert [c.content for c in page.items] == ["thanks", "first!"]
        first = page.items[1]
        assert first.owner.username == "bob"
        assert first.likes_count == 1
        assert first.is_liked is True
        assert page.items[0].is_liked is False

    def test_ascending_and_paged(self, store, make):
        alice = make.user("alice")
        video = make.video(alice)
        for i in range(5):
            make.comment(alice, video, f"c{i}", minute=i)

        page = list_comments(video.id, page=2, limit=2, sort_direction="asc", store=store)

        assert [c.content for c in page.items] == ["c2", "c3"]
        assert page.total_pages == 3
        assert page.has_prev_page is True

    def test_video_without_comments_is_empty_page(self, store, make):
        video = make.video(make.user("alice"))
        page = list_comments(video.id, store=store)
        assert page.items == []
        assert page.total_items == 0

    def test_missing_video(self, store, missing_id):
        with pytest.raises(NotFound):
            list_comments(missing_id, store=store)


class TestCommentWrites:

    def test_add_update_delete(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)

        created = add_comment(video.id, CommentRequest(content="hello"), bob.id, store=store)
        assert created.owner_id == bob.id

        edited = update_comment(created.id, CommentRequest(content="hello again"), bob.id, store=store)
        assert edited.content == "hello again"

        toggle_comment_like(created.id, alice.id, store=store)
        delete_comment(created.id, bob.id, store=store)

        assert list_comments(video.id, store=store).items == []
        assert store.count(Like) == 0

    def test_only_owner_may_edit(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        comment = make.comment(bob, make.video(alice))

        with pytest.raises(Forbidden):
            update_comment(comment.id, CommentRequest(content="mine now"), alice.id, store=store)
        with pytest.raises(Forbidden):
            delete_comment(comment.id, alice.id, store=store)

    def test_unknown_viewer_cannot_comment(self, store, make, missing_id):
        video = make.video(make.user("alice"))

        with pytest.raises(NotFound):
            add_comment(video.id, CommentRequest(content="ghost"), missing_id, store=store)
        assert list_comments(video.id, store=store).items == []


class TestLikeToggles:
    """Toggles flip state; uniqueness holds per (target, user)"""

    def test_double_toggle_restores_state(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)

        assert toggle_video_like(video.id, bob.id, store=store).active is True
        assert [v.video.id for v in list_liked_videos(bob.id, store=store)] == [video.id]

        assert toggle_video_like(video.id, bob.id, store=store).active is False
        assert list_liked_videos(bob.id, store=store) == []

    def test_duplicate_like_rejected_by_store(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)
        make.like_video(bob, video)

        with pytest.raises(Conflict):
            store.create(Like(liked_by_id=bob.id, video_id=video.id))
        store.rollback()
        assert store.count(Like, video_id=video.id) == 1

    def test_duplicate_comment_like_rejected_by_store(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        comment = make.comment(alice, make.video(alice))
        make.like_comment(bob, comment)

        with pytest.raises(Conflict):
            store.create(Like(liked_by_id=bob.id, comment_id=comment.id))
        store.rollback()
        assert store.count(Like, comment_id=comment.id) == 1

    def test_foreign_key_failure_is_not_a_conflict(self, store, make, missing_id):
        video = make.video(make.user("alice"))

        with pytest.raises(DataAccessFailure):
            store.create(Like(liked_by_id=missing_id, video_id=video.id))
        store.rollback()
        assert store.count(Like) == 0

    def test_check_failure_is_not_a_conflict(self, store, make):
        bob = make.user("bob")

        with pytest.raises(DataAccessFailure):
            store.create(Like(liked_by_id=bob.id))
        store.rollback()
        assert store.count(Like) == 0

    def test_unknown_viewer_cannot_like(self, store, make, missing_id):
        """A viewer id with no user row is rejected, never reported as liked"""
        alice = make.user("alice")
        video = make.video(alice)
        comment = make.comment(alice, video)

        with pytest.raises(NotFound):
            toggle_video_like(video.id, missing_id, store=store)
        with pytest.raises(NotFound):
            toggle_comment_like(comment.id, missing_id, store=store)
        assert store.count(Like) == 0

    def test_toggle_treats_lost_race_as_liked(self, store, make, monkeypatch):
        """Insert conflict means another request liked it first"""
        alice = make.user("alice")
        bob = make.user("bob")
        video = make.video(alice)
        make.like_video(bob, video)

        monkeypatch.setattr(store, "find_one", lambda *args, **kwargs: None)
        assert toggle_video_like(video.id, bob.id, store=store).active is True

    def test_missing_targets(self, store, make, missing_id):
        bob = make.user("bob")
        with pytest.raises(NotFound):
            toggle_video_like(missing_id, bob.id, store=store)
        with pytest.raises(NotFound):
            toggle_comment_like(missing_id, bob.id, store=store)
        with pytest.raises(InvalidIdentifier):
            toggle_video_like("xyz", bob.id, store=store)


class TestLikedVideos:

    def test_published_only_newest_like_first(self, store, make):
        alice = make.user("alice")
        bob = make.user("bob")
        first = make.video(alice, "First")
        second = make.video(alice, "Second")
        draft = make.video(alice, "Draft", is_published=False)
        make.like_video(bob, first, minute=1)
        make.like_video(bob, second, minute=2)
        make.like_video(bob, draft, minute=3)

        liked = list_liked_videos(bob.id, store=store)

        assert [item.video.title for item in liked] == ["Second", "First"]
        assert liked[0].video.owner_details.username == "alice"

    def test_comment_likes_not_listed(self, store, make):
        alice = make.user("alice")
        comment = make.comment(alice, make.video(alice))
        make.like_comment(alice, comment)

        assert list_liked_videos(alice.id, store=store) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
