"""Inputs, outputs, and errors of file discovery."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path


class DiscoveryError(Exception):
    """
    Discovery can't produce a file list at all (bad git reference, not a
    repository, unreadable standard input). No partial result is returned.
    """


@dataclass(frozen=True)
class DiscoveryOptions:
    """
    What to look for, as given on the command line.

    `files` may hold file paths, directories, and glob patterns. With
    `read_stdin`, paths are read one per line from standard input instead.
    `git_from`/`git_to` narrow the result to files changed between two revisions
    (`git_to` defaults to `HEAD`).
    """

    files: Sequence[str] = ()
    recursive: bool = False
    skip_hidden: bool = False
    read_stdin: bool = False
    git_from: str | None = None
    git_to: str | None = None


@dataclass(frozen=True)
class GitRangeInfo:
    """A git range pinned to concrete commits, and the files changed in it."""

    from_hash: str
    to_hash: str
    changed_files: list[Path] = field(default_factory=list)


@dataclass
class DiscoveryResult:
    files: list[Path]
    git_range: GitRangeInfo | None = None
