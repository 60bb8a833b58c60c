"""Tests for path helpers and the PathTree node store."""

import pytest

from uigen.types import FileNode, NodeType
from uigen.vfs.paths import (
    ROOT, PathTree, ancestors, base_name, is_descendant, join_path,
    normalize_path, parent_path, split_extension,
)


def _file(path: str, content: str = "") -> FileNode:
    return FileNode(path=path, name=base_name(path), type=NodeType.FILE, content=content)


# ── Path helpers ──────────────────────────────────────────────────────────────

class TestNormalizePath:

    @pytest.mark.parametrize("raw, expected", [
        ("", "/"),
        ("/", "/"),
        ("App.jsx", "/App.jsx"),
        ("/components//Button.jsx", "/components/Button.jsx"),
        ("/components/./ui/../Button.jsx", "/components/Button.jsx"),
        ("/../../etc", "/etc"),
        ("components\\Button.jsx", "/components/Button.jsx"),
        ("/src/", "/src"),
    ])
    def test_normal_forms(self, raw, expected):
        assert normalize_path(raw) == expected

    def test_idempotent(self):
        once = normalize_path("a/b/../c//d.jsx")
        assert normalize_path(once) == once


class TestPathHelpers:

    def test_parent_of_root_is_none(self):
        assert parent_path(ROOT) is None

    def test_parent_of_top_level_is_root(self):
        assert parent_path("/App.jsx") == "/"
        assert parent_path("/a/b/c.jsx") == "/a/b"

    def test_base_name(self):
        assert base_name("/a/b/c.jsx") == "c.jsx"
        assert base_name(ROOT) == ""

    def test_join_path_normalizes(self):
        assert join_path("/components", "../lib/util.js") == "/lib/util.js"

    def test_is_descendant(self):
        assert is_descendant("/a/b", "/a")
        assert not is_descendant("/ab", "/a")
        assert not is_descendant("/a", "/a")
        assert is_descendant("/a", ROOT)

    def test_split_extension(self):
        assert split_extension("/a/b.test.jsx") == ("/a/b.test", ".jsx")
        assert split_extension("/a/.env") == ("/a/.env", "")
        assert split_extension("/a/Makefile") == ("/a/Makefile", "")

    def test_ancestors_root_first(self):
        assert ancestors("/a/b/c.jsx") == ["/", "/a", "/a/b"]
        assert ancestors(ROOT) == []


# ── PathTree ──────────────────────────────────────────────────────────────────

class TestPathTree:

    def test_root_exists_and_survives_clear(self):
        tree = PathTree()
        tree.ensure_directories("/a")
        tree.clear()
        assert len(tree) == 1
        assert tree.get(ROOT).type == NodeType.DIRECTORY

    def test_insert_requires_parent(self):
        tree = PathTree()
        with pytest.raises(KeyError):
            tree.insert(_file("/missing/App.jsx"))

    def test_insert_rejects_duplicates(self):
        tree = PathTree()
        tree.insert(_file("/App.jsx"))
        with pytest.raises(KeyError):
            tree.insert(_file("/App.jsx"))

    def test_children_stay_sorted(self):
        tree = PathTree()
        for name in ("/c.jsx", "/a.jsx", "/b.jsx"):
            tree.insert(_file(name))
        assert tree.get(ROOT).children == ["/a.jsx", "/b.jsx", "/c.jsx"]

    def test_ensure_directories_returns_created(self):
        tree = PathTree()
        tree.ensure_directories("/a")
        assert tree.ensure_directories("/a/b/c") == ["/a/b", "/a/b/c"]

    def test_ensure_directories_refuses_file_in_the_way(self):
        tree = PathTree()
        tree.insert(_file("/a"))
        with pytest.raises(KeyError):
            tree.ensure_directories("/a/b")

    def test_depth_first_iteration(self):
        tree = PathTree()
        tree.ensure_directories("/b")
        tree.insert(_file("/b/x.jsx"))
        tree.insert(_file("/a.jsx"))
        assert list(tree) == ["/", "/a.jsx", "/b", "/b/x.jsx"]

    def test_walk_files_skips_directories(self):
        tree = PathTree()
        tree.ensure_directories("/src")
        tree.insert(_file("/src/App.jsx", "x"))
        assert [n.path for n in tree.walk_files()] == ["/src/App.jsx"]

    def test_remove_detaches_from_parent(self):
        tree = PathTree()
        tree.insert(_file("/App.jsx"))
        tree.remove("/App.jsx")
        assert not tree.contains("/App.jsx")
        assert tree.get(ROOT).children == []
