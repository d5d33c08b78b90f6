"""
Per-file checking, in memory for ordinary files and streamed for very large ones.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from lineguard.checker.rules import TAIL_SIZE, classify, decode_lines
from lineguard.checker.types import CheckResult
from lineguard.config import Config
from lineguard.fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

# Files larger than this are read line by line instead of all at once.
STREAMING_THRESHOLD = 10 * 1024 * 1024


def describe_error(path: Path, error: Exception) -> str:
    """Format a per-file error as `path: reason`."""
    if isinstance(error, OSError) and error.strerror:
        return f"{path}: {error.strerror}"
    return f"{path}: {error}"


class ContentChecker:
    """
    Checks single files against the enabled rules. Holds no mutable state, so
    one instance can be shared across worker threads.
    """

    def __init__(
        self,
        config: Config,
        fs: FileSystem | None = None,
        streaming_threshold: int = STREAMING_THRESHOLD,
    ) -> None:
        self._config: Config = config
        self._fs: FileSystem = fs if fs is not None else LocalFileSystem()
        self._streaming_threshold: int = streaming_threshold

    def check(self, path: Path) -> CheckResult:
        """
        Check one file. Filesystem and decoding problems are reported in
        `CheckResult.error`, never raised.
        """
        try:
            size = self._fs.file_size(path)
        except OSError as e:
            return CheckResult(file_path=path, error=describe_error(path, e))

        if size > self._streaming_threshold:
            return self._check_streaming(path)
        return self._check_in_memory(path)

    def _check_in_memory(self, path: Path) -> CheckResult:
        try:
            content = self._fs.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            return CheckResult(file_path=path, error=describe_error(path, e))

        issues = classify(
            io.StringIO(content, newline="\n"),
            lambda: content[-TAIL_SIZE:],
            self._config.checks,
        )
        return CheckResult(file_path=path, issues=issues)

    def _check_streaming(self, path: Path) -> CheckResult:
        checks = self._config.checks
        if not checks.trailing_spaces:
            # Only the ending matters, so skip the line scan entirely.
            issues = classify((), lambda: self._read_tail(path), checks)
            return CheckResult(file_path=path, issues=issues)

        try:
            reader = self._fs.open_binary(path)
        except OSError as e:
            return CheckResult(file_path=path, error=describe_error(path, e))

        with reader:
            issues = classify(decode_lines(reader), lambda: self._read_tail(path), checks)
        return CheckResult(file_path=path, issues=issues)

    def _read_tail(self, path: Path) -> str:
        """
        Re-read just the end of the file. The line reader has already consumed
        the stream, and the file may have changed in between; that's accepted.
        """
        try:
            tail = self._fs.read_tail(path, TAIL_SIZE)
        except OSError as e:
            logger.debug("Could not read end of %s: %s", path, e)
            return ""
        return tail.decode("utf-8", errors="replace")


def check_files(
    paths: Sequence[Path],
    config: Config,
    jobs: int | None = None,
    fs: FileSystem | None = None,
    on_checked: Callable[[CheckResult], None] | None = None,
) -> list[CheckResult]:
    """
    Check many files on a thread pool. Results come back in the order of
    `paths`. `on_checked` is called once per finished file, possibly from
    worker threads.
    """
    checker = ContentChecker(config, fs=fs)

    def run(path: Path) -> CheckResult:
        result = checker.check(path)
        if on_checked is not None:
            on_checked(result)
        return result

    if not paths:
        return []
    max_workers = jobs if jobs and jobs > 0 else min(32, (os.cpu_count() or 1) + 4)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(run, paths))
