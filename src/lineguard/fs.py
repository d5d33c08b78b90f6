"""
Filesystem access used by discovery, checking, and fixing.

Everything that touches the disk goes through a `FileSystem` so tests can swap
in fakes (e.g. to report a synthetic size and force streaming mode).
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import BinaryIO, Protocol

WalkEntry = tuple[str, list[str], list[str]]

# Characters that make a path component a glob pattern.
_GLOB_CHARS = frozenset("*?[")


class FileSystem(Protocol):
    def file_size(self, path: Path) -> int:
        """Size in bytes. Raises `OSError` if the path can't be stat'ed."""
        ...

    def read_text(self, path: Path) -> str:
        """Whole file as UTF-8 text, line terminators untranslated."""
        ...

    def open_binary(self, path: Path) -> BinaryIO:
        """
        Open for incremental reading. Iterating yields raw lines split on `\\n`
        only, with terminators (including any `\\r`) left in place. Lines are
        decoded one at a time by the caller.
        """
        ...

    def read_tail(self, path: Path, size: int) -> bytes:
        """The last `size` bytes of the file (fewer if the file is shorter)."""
        ...

    def is_file(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def walk(self, root: Path, onerror: Callable[[OSError], None]) -> Iterator[WalkEntry]:
        """
        Same contract as `os.walk(root, onerror=onerror)` (top-down), following
        symlinked directories. Callers prune cycles.
        """
        ...

    def glob(self, pattern: str) -> list[str]:
        """
        Expand a glob pattern (`**` matches across directories). Names starting
        with a dot are matched like any other.
        """
        ...


class LocalFileSystem:
    """`FileSystem` backed by the real operating system."""

    def file_size(self, path: Path) -> int:
        return os.stat(path).st_size

    def read_text(self, path: Path) -> str:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def open_binary(self, path: Path) -> BinaryIO:
        return open(path, "rb")

    def read_tail(self, path: Path, size: int) -> bytes:
        with open(path, "rb") as f:
            end = f.seek(0, os.SEEK_END)
            f.seek(max(0, end - size))
            return f.read(size)

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def walk(self, root: Path, onerror: Callable[[OSError], None]) -> Iterator[WalkEntry]:
        return os.walk(root, onerror=onerror, followlinks=True)

    def glob(self, pattern: str) -> list[str]:
        # Split off the literal leading directories, then let pathlib match the
        # rest. Unlike `glob.glob`, pathlib matches dot-names too.
        parts = Path(pattern).parts
        for i, part in enumerate(parts):
            if any(c in part for c in _GLOB_CHARS):
                root = Path(*parts[:i]) if i > 0 else Path(".")
                try:
                    return [str(p) for p in root.glob(str(Path(*parts[i:])))]
                except ValueError:
                    # e.g. `**` inside a component on older Pythons
                    return []
        return [pattern] if os.path.lexists(pattern) else []
