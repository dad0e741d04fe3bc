"""Tests for materialized path arithmetic."""

import pytest

from contextforge.services.folder_paths import (
    compute_level,
    compute_path,
    is_descendant_path,
    rebase_path,
)


class TestComputePath:

    def test_root_folder(self):
        assert compute_path(None, "Work") == "/Work"

    def test_nested_folder(self):
        assert compute_path("/Work", "Prompts") == "/Work/Prompts"

    def test_deeply_nested(self):
        assert compute_path("/A/B/C", "D") == "/A/B/C/D"


class TestComputeLevel:

    def test_root_is_zero(self):
        assert compute_level(None) == 0

    def test_child_is_parent_plus_one(self):
        assert compute_level(0) == 1
        assert compute_level(4) == 5


class TestIsDescendantPath:

    def test_child_is_descendant(self):
        assert is_descendant_path("/A/B", "/A")

    def test_self_is_not_descendant(self):
        assert not is_descendant_path("/A", "/A")

    def test_shared_name_prefix_is_not_descendant(self):
        assert not is_descendant_path("/AB/C", "/A")


class TestRebasePath:

    def test_direct_child(self):
        assert rebase_path("/A/B", "/A", "/Z") == ("/Z/B", 1)

    def test_grandchild_depth(self):
        assert rebase_path("/A/B/C", "/A", "/X/Y") == ("/X/Y/B/C", 2)

    def test_non_descendant_raises(self):
        with pytest.raises(ValueError):
            rebase_path("/AB/C", "/A", "/Z")

    def test_prefix_itself_raises(self):
        with pytest.raises(ValueError):
            rebase_path("/A", "/A", "/Z")
