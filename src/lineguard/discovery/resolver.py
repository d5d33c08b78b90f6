"""
Discoverer: main entry point for file discovery.

Resolves a mix of files, directories, and glob patterns (or a list of paths on
standard input) into a deduplicated list of files to check, applying the
extension, ignore-pattern, and hidden-file filters, and optionally narrowing
the result to files changed in a git range.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO

from lineguard.config import Config
from lineguard.discovery.defaults import BINARY_EXTENSIONS
from lineguard.discovery.git import GitRangeFilter
from lineguard.discovery.ignore import IgnoreMatcher
from lineguard.discovery.types import (
    DiscoveryError,
    DiscoveryOptions,
    DiscoveryResult,
    GitRangeInfo,
)
from lineguard.fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

# Characters that indicate a path is a glob pattern rather than a literal path.
_GLOB_CHARS = frozenset("*?[")


def is_checkable_extension(path: Path, config: Config) -> bool:
    """
    Extension policy. Known binary extensions are always rejected, even when
    listed in `config.file_extensions`; otherwise a non-empty allow-list must
    contain the extension. Files without an extension always pass.
    """
    extension = path.suffix[1:].lower()
    if not extension:
        return True
    if extension in BINARY_EXTENSIONS:
        return False
    if config.file_extensions:
        return extension in config.file_extensions
    return True


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


class Discoverer:
    """
    Turns command-line inputs into the ordered list of files to check.

    Ignore patterns are compiled once, when the `Discoverer` is created. Paths
    are matched relative to `root` (the current directory by default).
    """

    def __init__(
        self,
        config: Config,
        fs: FileSystem | None = None,
        git: GitRangeFilter | None = None,
        root: Path | None = None,
        stdin: TextIO | None = None,
    ) -> None:
        self._config: Config = config
        self._fs: FileSystem = fs if fs is not None else LocalFileSystem()
        self._root: Path = root if root is not None else Path.cwd()
        self._git: GitRangeFilter = git if git is not None else GitRangeFilter(self._root)
        self._stdin: TextIO | None = stdin
        self._ignore: IgnoreMatcher = IgnoreMatcher(config.ignore_patterns, self._root)

    def discover(self, options: DiscoveryOptions) -> DiscoveryResult:
        """
        Resolve `options` into a deduplicated list of files.

        Each input is handled as:
        - Existing directory → walked (recursively only with `options.recursive`)
        - Contains glob characters → expanded; if nothing matches, taken literally
        - Otherwise → taken as a literal file path

        Raises `DiscoveryError` if standard input can't be read or the git range
        can't be resolved.
        """
        inputs = self._read_stdin() if options.read_stdin else list(options.files)

        seen: set[str] = set()
        files: list[Path] = []
        for path in self._resolve_inputs(inputs, options):
            key = os.path.abspath(path)
            if key not in seen:
                seen.add(key)
                files.append(path)

        git_range: GitRangeInfo | None = None
        if options.git_from:
            git_range = self._git.range_info(options.git_from, options.git_to)
            # git reports paths under the resolved work tree root
            changed = {os.path.realpath(p) for p in git_range.changed_files}
            files = [f for f in files if os.path.realpath(f) in changed]

        return DiscoveryResult(files=files, git_range=git_range)

    def _read_stdin(self) -> list[str]:
        stream = self._stdin if self._stdin is not None else sys.stdin
        try:
            # Only `\n` separates entries; other line breaks can be part of a name.
            lines = stream.read().split("\n")
        except (OSError, UnicodeDecodeError) as e:
            raise DiscoveryError(f"Failed to read file list from stdin: {e}") from e
        return [line.strip() for line in lines if line.strip()]

    def _resolve_inputs(self, inputs: Iterable[str], options: DiscoveryOptions) -> Iterator[Path]:
        for raw_path in inputs:
            p = Path(raw_path)

            if self._fs.is_dir(p):
                for found in self._walk_directory(p, options):
                    if self._accept(found, options, literal=False):
                        yield found
            elif any(c in raw_path for c in _GLOB_CHARS):
                matches = sorted(self._fs.glob(raw_path))
                if matches:
                    for match in matches:
                        found = Path(match)
                        if self._accept(found, options, literal=False):
                            yield found
                elif self._accept(p, options, literal=True):
                    yield p
            elif self._accept(p, options, literal=True):
                yield p

    def _accept(self, path: Path, options: DiscoveryOptions, literal: bool) -> bool:
        """
        The filter pipeline, in order: regular file, extension policy, ignore
        patterns, hidden files. The hidden-file rule never applies to a path
        given literally.
        """
        if not self._fs.is_file(path):
            if literal:
                logger.debug("Skipping %s: not a regular file", path)
            return False
        if not is_checkable_extension(path, self._config):
            return False
        if self._ignore.is_ignored(path):
            return False
        if options.skip_hidden and not literal and is_hidden(path):
            return False
        return True

    def _walk_directory(self, root: Path, options: DiscoveryOptions) -> Iterator[Path]:
        """
        Walk a directory tree, pruning ignored (and, with `skip_hidden`, hidden)
        subdirectories. Symlinked directories are followed, but a directory that
        resolves to one already visited is not entered again, so link cycles end.
        An unreadable directory is logged and skipped.
        """
        visited = {os.path.realpath(root)}

        def on_error(error: OSError) -> None:
            logger.warning("%s: %s", error.filename or root, error.strerror or error)

        for dirpath, dirnames, filenames in self._fs.walk(root, on_error):
            current = Path(dirpath)

            if options.recursive:
                # Prune in-place (prevents descent)
                kept: list[str] = []
                for d in sorted(dirnames):
                    if options.skip_hidden and d.startswith("."):
                        continue
                    if self._ignore.is_ignored(current / d, is_dir=True):
                        continue
                    real = os.path.realpath(current / d)
                    if real in visited:
                        logger.debug("Not entering %s again: already visited", current / d)
                        continue
                    visited.add(real)
                    kept.append(d)
                dirnames[:] = kept
            else:
                dirnames[:] = []

            for filename in sorted(filenames):
                yield current / filename
