"""Tests for pattern expansion and stat lookup."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pollwatch.watching import ABSENT, resolve_patterns, stat_mtime
from pollwatch.watching.patterns import expand_path, full_depth
from tests.utils import touch


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    touch(tmp_path / "a.txt")
    touch(tmp_path / "b.py")
    touch(tmp_path / "lib" / "c.py")
    touch(tmp_path / "lib" / "deep" / "d.py")
    return tmp_path


class TestResolvePatterns:
    """Glob and directory expansion."""

    def test_directory_expands_recursively(self, tree: Path) -> None:
        found = resolve_patterns(str(tree))
        assert found == sorted(found)
        assert set(found) == {
            str(tree / "a.txt"),
            str(tree / "b.py"),
            str(tree / "lib" / "c.py"),
            str(tree / "lib" / "deep" / "d.py"),
        }

    def test_directories_are_not_returned(self, tree: Path) -> None:
        found = resolve_patterns(str(tree / "**"))
        assert str(tree / "lib") not in found
        assert all(not os.path.isdir(path) for path in found)

    def test_recursive_glob(self, tree: Path) -> None:
        found = resolve_patterns(str(tree / "**" / "*.py"))
        assert set(found) == {
            str(tree / "b.py"),
            str(tree / "lib" / "c.py"),
            str(tree / "lib" / "deep" / "d.py"),
        }

    def test_multiple_patterns_are_deduplicated_in_order(self, tree: Path) -> None:
        found = resolve_patterns([str(tree / "lib" / "c.py"), str(tree / "*.txt"), str(tree / "lib")])
        assert found[:2] == [str(tree / "lib" / "c.py"), str(tree / "a.txt")]
        assert found.count(str(tree / "lib" / "c.py")) == 1
        assert str(tree / "lib" / "deep" / "d.py") in found

    def test_missing_literal_path_is_kept(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope.txt"
        assert resolve_patterns(missing) == [str(missing)]

    def test_unmatched_glob_is_dropped(self, tmp_path: Path) -> None:
        assert resolve_patterns(str(tmp_path / "*.nothing")) == []

    def test_none_resolves_to_nothing(self) -> None:
        assert resolve_patterns(None) == []

    def test_paths_are_normalized(self, tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tree)
        assert resolve_patterns("./lib/c.py") == [os.path.join("lib", "c.py")]


class TestHelpers:
    """expand_path, full_depth and stat_mtime."""

    def test_expand_path_tilde(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~/x.txt") == str(tmp_path / "x.txt")
        assert expand_path("a/~b") == "a/~b"

    def test_full_depth(self, tree: Path) -> None:
        assert full_depth(str(tree)) == os.path.join(str(tree), "**", "*")
        assert full_depth(str(tree / "a.txt")) == str(tree / "a.txt")

    def test_stat_mtime(self, tmp_path: Path) -> None:
        path = touch(tmp_path / "f.txt", mtime=1_000_000.0)
        assert stat_mtime(str(path)) == 1_000_000.0
        assert stat_mtime(str(tmp_path / "missing")) is ABSENT
