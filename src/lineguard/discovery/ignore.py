"""User ignore patterns, compiled once per run and matched with pathspec."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path, PurePath

import pathspec

logger = logging.getLogger(__name__)


class IgnoreMatcher:
    """
    Decides whether a path is excluded by any of the configured ignore patterns.

    Each pattern uses gitignore syntax and is compiled on its own. A path is
    ignored if any pattern matches:

    - the path, normalized lexically and made relative to `root`,
    - the bare file name (only for patterns with no `/` or `\\`), or
    - any ancestor directory of the normalized path, so one pattern can
      exclude a whole subtree (`node_modules` matches `node_modules/pkg/index.js`).

    Patterns that fail to compile are dropped and never match.
    """

    def __init__(self, patterns: Sequence[str], root: Path | None = None) -> None:
        self._root: str = os.path.abspath(root if root is not None else Path.cwd())
        self._specs: list[tuple[pathspec.PathSpec, bool]] = []
        for pattern in patterns:
            try:
                spec = pathspec.GitIgnoreSpec.from_lines([pattern])
            except (ValueError, TypeError) as e:
                logger.debug("Dropping ignore pattern %r: %s", pattern, e)
                continue
            is_bare = "/" not in pattern and "\\" not in pattern
            self._specs.append((spec, is_bare))

    def __bool__(self) -> bool:
        return bool(self._specs)

    def relative_form(self, path: str | Path) -> PurePath:
        """
        Normalize `path` without touching the filesystem (no symlink resolution)
        and express it relative to the root. Paths outside the root keep their
        absolute parts, minus the anchor.
        """
        absolute = os.path.abspath(path)
        try:
            relative = os.path.relpath(absolute, self._root)
        except ValueError:
            relative = absolute
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            relative = absolute
        pure = PurePath(relative)
        if pure.anchor:
            pure = PurePath(*pure.parts[1:]) if len(pure.parts) > 1 else PurePath(".")
        return pure

    def is_ignored(self, path: str | Path, is_dir: bool = False) -> bool:
        if not self._specs:
            return False

        normalized = self.relative_form(path)
        if normalized == PurePath("."):
            return False
        name = normalized.name
        ancestors = [p for p in normalized.parents if p != PurePath(".")]

        for spec, is_bare in self._specs:
            if _matches(spec, normalized, is_dir):
                return True
            if is_bare and _matches(spec, PurePath(name), is_dir):
                return True
            for ancestor in ancestors:
                if _matches(spec, ancestor, True):
                    return True
        return False


def _matches(spec: pathspec.PathSpec, path: PurePath, is_dir: bool) -> bool:
    posix = path.as_posix()
    if spec.match_file(posix):
        return True
    # Directory-only patterns such as `build/` need the trailing slash.
    return is_dir and spec.match_file(posix + "/")
