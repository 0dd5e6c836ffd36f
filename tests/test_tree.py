"""Tests for the in-memory folder index."""

from drive_api import models
from drive_api.tree import FolderTree


def _folder(folder_id, name, parent_id=None):
    return models.Folder(id=folder_id, name=name, owner_id="u1", parent_id=parent_id)


class TestFolderTree:
    def test_path_and_depth(self):
        tree = FolderTree([
            _folder("a", "A"),
            _folder("b", "B", "a"),
            _folder("c", "C", "b"),
        ])

        assert tree.path_of("a") == "A"
        assert tree.path_of("c") == "A/B/C"
        assert tree.depth_of("a") == 1
        assert tree.depth_of("c") == 3

    def test_walk_is_parent_first(self):
        tree = FolderTree([
            _folder("a", "A"),
            _folder("b1", "B1", "a"),
            _folder("b2", "B2", "a"),
            _folder("c", "C", "b1"),
            _folder("z", "Z"),
        ])

        order = [folder.id for folder in tree.walk("a")]

        assert set(order) == {"a", "b1", "b2", "c"}
        assert order[0] == "a"
        assert order.index("b1") < order.index("c")

    def test_walk_leaf_yields_only_itself(self):
        tree = FolderTree([_folder("a", "A")])
        assert [folder.id for folder in tree.walk("a")] == ["a"]

    def test_walk_unknown_id_is_empty(self):
        assert list(FolderTree([]).walk("missing")) == []

    def test_corrupted_cycle_terminates(self):
        tree = FolderTree([
            _folder("a", "A", "b"),
            _folder("b", "B", "a"),
        ])

        assert sorted(folder.id for folder in tree.walk("a")) == ["a", "b"]
        assert tree.depth_of("a") == 2
