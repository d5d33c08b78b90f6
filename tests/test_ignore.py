"""Tests for IgnoreMatcher's path, file name, and ancestor matching."""

from __future__ import annotations

from pathlib import Path, PurePath

from lineguard.discovery import IgnoreMatcher


def test_no_patterns_ignores_nothing(tmp_path: Path):
    matcher = IgnoreMatcher([], tmp_path)
    assert not matcher
    assert not matcher.is_ignored(tmp_path / "anything.txt")


def test_bare_name_matches_at_any_depth(tmp_path: Path):
    matcher = IgnoreMatcher(["secrets.txt"], tmp_path)
    assert matcher.is_ignored(tmp_path / "secrets.txt")
    assert matcher.is_ignored(tmp_path / "a" / "b" / "c" / "secrets.txt")
    assert not matcher.is_ignored(tmp_path / "a" / "other.txt")


def test_extension_glob_matches_file_name(tmp_path: Path):
    matcher = IgnoreMatcher(["*.log"], tmp_path)
    assert matcher.is_ignored(tmp_path / "deep" / "dir" / "app.log")
    assert not matcher.is_ignored(tmp_path / "deep" / "dir" / "app.txt")


def test_ancestor_match_suppresses_subtree(tmp_path: Path):
    matcher = IgnoreMatcher(["node_modules"], tmp_path)
    assert matcher.is_ignored(tmp_path / "node_modules" / "pkg" / "dist" / "index.js")
    assert matcher.is_ignored(tmp_path / "web" / "node_modules" / "x.js")
    assert matcher.is_ignored(tmp_path / "node_modules", is_dir=True)
    assert not matcher.is_ignored(tmp_path / "src" / "index.js")


def test_path_pattern_matches_relative_to_root(tmp_path: Path):
    matcher = IgnoreMatcher(["build/generated"], tmp_path)
    assert matcher.is_ignored(tmp_path / "build" / "generated" / "out.c")
    assert not matcher.is_ignored(tmp_path / "build" / "src" / "generated")
    # Patterns with a separator are not matched against the bare file name.
    assert not matcher.is_ignored(tmp_path / "other" / "build" / "generated" / "x")


def test_directory_only_pattern(tmp_path: Path):
    matcher = IgnoreMatcher(["build/"], tmp_path)
    assert matcher.is_ignored(tmp_path / "build" / "output.txt")
    assert matcher.is_ignored(tmp_path / "build", is_dir=True)


def test_paths_are_normalized_lexically(tmp_path: Path):
    matcher = IgnoreMatcher(["vendor"], tmp_path)
    assert matcher.is_ignored(tmp_path / "src" / ".." / "vendor" / "." / "lib.py")
    assert not matcher.is_ignored(tmp_path / "vendor" / ".." / "src" / "lib.py")


def test_relative_paths_use_current_directory(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    matcher = IgnoreMatcher(["docs/*.md"])
    assert matcher.is_ignored("docs/readme.md")
    assert matcher.is_ignored("./docs/readme.md")
    assert not matcher.is_ignored("src/readme.md")


def test_relative_form(tmp_path: Path):
    matcher = IgnoreMatcher(["x"], tmp_path)
    assert matcher.relative_form(tmp_path / "a" / ".." / "b" / "c.txt") == PurePath("b/c.txt")
    assert matcher.relative_form(tmp_path) == PurePath(".")


def test_malformed_pattern_is_dropped(tmp_path: Path):
    # A lone backslash can't be compiled; it is silently discarded.
    matcher = IgnoreMatcher(["\\", "*.tmp"], tmp_path)
    assert matcher.is_ignored(tmp_path / "junk.tmp")
    assert not matcher.is_ignored(tmp_path / "keep.txt")


def test_root_itself_is_never_ignored(tmp_path: Path):
    matcher = IgnoreMatcher(["*"], tmp_path)
    assert not matcher.is_ignored(tmp_path, is_dir=True)
    assert matcher.is_ignored(tmp_path / "file.txt")
