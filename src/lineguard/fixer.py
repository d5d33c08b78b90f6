"""
Rewrite files to remove the issues the checker found.

Trailing spaces and tabs are stripped from each line and the file ending is
normalized to exactly one line terminator. Line terminators (`\\n` or `\\r\\n`)
are otherwise left as they are. Files are replaced atomically.
"""

from __future__ import annotations

import contextlib
import io
import os
import shutil
import tempfile
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from lineguard.checker import STREAMING_THRESHOLD, Issue, IssueKind
from lineguard.checker.rules import decode_lines, split_terminator
from lineguard.config import Config
from lineguard.fs import FileSystem, LocalFileSystem


@dataclass
class FixResult:
    file_path: Path
    fixed: bool
    issues_fixed: list[Issue] = field(default_factory=list)


def rewrite_lines(
    lines: Iterable[str], out: TextIO, strip_trailing: bool, fix_ending: bool
) -> None:
    """
    Copy `lines` to `out`, optionally stripping trailing whitespace and
    normalizing the end of the file. Blank lines are held back until a
    non-blank line shows they aren't at the end.
    """
    pending: list[str] = []
    wrote_any = False
    ends_with_terminator = False
    terminator = "\n"

    for raw_line in lines:
        body, line_terminator = split_terminator(raw_line)
        if strip_trailing:
            body = body.rstrip(" \t")
        if line_terminator:
            terminator = line_terminator
        if fix_ending and not body:
            pending.append(line_terminator)
            continue
        out.write("".join(pending))
        pending.clear()
        out.write(body + line_terminator)
        wrote_any = True
        ends_with_terminator = bool(line_terminator)

    if not fix_ending:
        return
    if wrote_any:
        if not ends_with_terminator:
            out.write(terminator)
    elif pending:
        # Only blank lines: keep a single terminator.
        out.write(terminator)


@contextlib.contextmanager
def atomic_output(path: Path) -> Iterator[TextIO]:
    """
    Write to a temporary file next to `path`, then move it into place,
    keeping the original file's permissions. Nothing changes on error.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with open(fd, "w", encoding="utf-8", newline="") as out:
            yield out
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def fix_file(
    path: Path,
    issues: Sequence[Issue],
    config: Config,
    dry_run: bool = False,
    fs: FileSystem | None = None,
) -> FixResult:
    """
    Fix the reported `issues` in `path`. Only issue kinds whose check is enabled
    are fixed. With `dry_run`, report what would change without writing.

    Raises `OSError` or `UnicodeDecodeError` if the file can't be read or written.
    """
    fs = fs if fs is not None else LocalFileSystem()
    strip_trailing = config.checks.trailing_spaces and any(
        i.kind == IssueKind.trailing_space for i in issues
    )
    fix_ending = config.checks.newline_ending and any(i.kind.is_newline_ending for i in issues)
    if not strip_trailing and not fix_ending:
        return FixResult(file_path=path, fixed=False)

    if fs.file_size(path) > STREAMING_THRESHOLD:
        return _fix_streaming(path, issues, strip_trailing, fix_ending, dry_run, fs)
    return _fix_in_memory(path, issues, strip_trailing, fix_ending, dry_run, fs)


def _fix_in_memory(
    path: Path,
    issues: Sequence[Issue],
    strip_trailing: bool,
    fix_ending: bool,
    dry_run: bool,
    fs: FileSystem,
) -> FixResult:
    content = fs.read_text(path)
    buffer = io.StringIO()
    rewrite_lines(io.StringIO(content, newline="\n"), buffer, strip_trailing, fix_ending)
    fixed_content = buffer.getvalue()

    fixed = fixed_content != content
    if fixed and not dry_run:
        with atomic_output(path) as out:
            out.write(fixed_content)

    return FixResult(file_path=path, fixed=fixed, issues_fixed=list(issues) if fixed else [])


def _fix_streaming(
    path: Path,
    issues: Sequence[Issue],
    strip_trailing: bool,
    fix_ending: bool,
    dry_run: bool,
    fs: FileSystem,
) -> FixResult:
    if not dry_run:
        with atomic_output(path) as out, fs.open_binary(path) as reader:
            rewrite_lines(decode_lines(reader), out, strip_trailing, fix_ending)
    return FixResult(file_path=path, fixed=True, issues_fixed=list(issues))
