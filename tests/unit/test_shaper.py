"""Tests for flat row to public shape conversion"""
import pytest

from readmodel.shaper import shape_row, shape_rows


class TestShapeRow:

    def test_nested_keys_become_objects(self):
        row = {
            "id": "v1",
            "owner__id": "u1",
            "owner__username": "alice",
            "owner__subscribers_count": 3,
        }
        assert shape_row(row) == {
            "id": "v1",
            "owner": {"id": "u1", "username": "alice", "subscribers_count": 3},
        }

    def test_two_levels_of_nesting(self):
        row = {"liked_at": 1, "video__id": "v1", "video__owner_details__username": "bob"}
        assert shape_row(row) == {
            "liked_at": 1,
            "video": {"id": "v1", "owner_details": {"username": "bob"}},
        }

    def test_outer_join_miss_collapses_to_none(self):
        """All-null nested object (no matching row) becomes None, not a dict of nulls"""
        row = {"id": "u1", "latest_video__id": None, "latest_video__title": None}
        assert shape_row(row) == {"id": "u1", "latest_video": None}

    def test_partially_null_object_kept(self):
        row = {"owner__id": "u1", "owner__avatar": None}
        assert shape_row(row) == {"owner": {"id": "u1", "avatar": None}}

    def test_internal_fields_stripped_at_any_depth(self):
        row = {
            "id": "u1",
            "password_hash": "x",
            "owner__refresh_token": "y",
            "owner__username": "alice",
        }
        shaped = shape_row(row)
        assert "password_hash" not in shaped
        assert shaped["owner"] == {"username": "alice"}

    def test_plain_null_fields_kept(self):
        assert shape_row({"id": "u1", "avatar": None}) == {"id": "u1", "avatar": None}

    def test_shape_rows(self):
        assert shape_rows([{"a__b": 1}, {"a__b": 2}]) == [{"a": {"b": 1}}, {"a": {"b": 2}}]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
