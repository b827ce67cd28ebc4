"""Tests for the paginator: count pass, window pass and page metadata"""
import pytest

from core.errors import ValidationFailed
from core.models import Video
from readmodel.composers.videos import video_feed
from readmodel.paginator import paginate
from readmodel.pipeline import Pipeline, PipelineCompositionError


@pytest.fixture
def twelve_videos(make):
    owner = make.user("alice")
    return [make.video(owner, f"Video {i:02d}", minute=i) for i in range(12)]


class TestPaginate:
    """Page windows over a sorted pipeline"""

    def test_first_page_metadata(self, store, twelve_videos):
        window = paginate(store, video_feed(), page=1, limit=5)

        assert window.total_items == 12
        assert window.total_pages == 3
        assert window.current_page == 1
        assert window.limit == 5
        assert window.has_next_page is True
        assert window.has_prev_page is False
        assert [v["title"] for v in window.items] == [f"Video {i:02d}" for i in (11, 10, 9, 8, 7)]

    def test_last_partial_page(self, store, twelve_videos):
        window = paginate(store, video_feed(), page=3, limit=5)

        assert len(window.items) == 2
        assert window.has_next_page is False
        assert window.has_prev_page is True

    def test_pages_do_not_overlap(self, store, twelve_videos):
        seen = []
        for page in (1, 2, 3):
            seen.extend(v["id"] for v in paginate(store, video_feed(), page=page, limit=5).items)
        assert len(seen) == len(set(seen)) == 12

    def test_page_beyond_total_is_empty(self, store, twelve_videos):
        window = paginate(store, video_feed(), page=4, limit=5)

        assert window.items == []
        assert window.total_items == 12
        assert window.has_next_page is False

    def test_empty_result(self, store):
        window = paginate(store, video_feed(), page=1, limit=10)

        assert window.items == []
        assert window.total_items == 0
        assert window.total_pages == 0
        assert window.has_next_page is False
        assert window.has_prev_page is False

    def test_items_are_shaped(self, store, twelve_videos):
        item = paginate(store, video_feed(), page=1, limit=1).items[0]
        assert item["owner_details"]["username"] == "alice"
        assert "owner_details__username" not in item

    def test_equal_sort_keys_ordered_by_id(self, store, make):
        """Identical created_at values still page deterministically"""
        owner = make.user("bob")
        videos = [make.video(owner, f"Same {i}", minute=0) for i in range(4)]

        ids = []
        for page in (1, 2):
            ids.extend(v["id"] for v in paginate(store, video_feed(), page=page, limit=2).items)
        assert ids == sorted((v.id for v in videos), reverse=True)

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5), (1, -3), ("1", 10), (True, 10)])
    def test_invalid_page_or_limit(self, store, page, limit):
        with pytest.raises(ValidationFailed):
            paginate(store, video_feed(), page=page, limit=limit)

    def test_unsorted_pipeline_rejected(self, store):
        pipeline = Pipeline("unsorted", Video, ("id", "title"))
        with pytest.raises(PipelineCompositionError):
            paginate(store, pipeline)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
