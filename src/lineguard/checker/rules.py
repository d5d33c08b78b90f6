"""
Line and file classification rules shared by every checking mode.

Both the in-memory and the streaming driver feed lines and the file tail through
`classify()`, so the two modes can't disagree about what counts as an issue.

A line terminator is `\\n`, optionally preceded by `\\r`. The terminator is not
part of the line, and a final terminator doesn't start an extra line.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from lineguard.checker.types import Issue, IssueKind
from lineguard.config import CheckConfig

logger = logging.getLogger(__name__)

# Enough trailing characters to tell `\r\n\r\n` from a single terminator.
TAIL_SIZE = 4

MISSING_NEWLINE_MESSAGE = "Missing newline at end of file"
MULTIPLE_NEWLINES_MESSAGE = "Multiple newlines at end of file"
TRAILING_SPACE_MESSAGE = "Trailing spaces found"


def split_terminator(raw_line: str) -> tuple[str, str]:
    """Split a raw line into its body and its terminator (`""`, `"\\n"` or `"\\r\\n"`)."""
    if raw_line.endswith("\r\n"):
        return raw_line[:-2], "\r\n"
    if raw_line.endswith("\n"):
        return raw_line[:-1], "\n"
    return raw_line, ""


def trailing_space_issue(raw_line: str, line_number: int) -> Issue | None:
    """
    Flag a line whose body ends in spaces or tabs. Carriage returns aren't
    whitespace here. A line of only spaces is flagged; an empty line isn't.
    """
    body, _ = split_terminator(raw_line)
    if len(body.rstrip(" \t")) < len(body):
        return Issue(IssueKind.trailing_space, line_number, TRAILING_SPACE_MESSAGE)
    return None


def newline_ending_issue(tail: str) -> Issue | None:
    """
    Classify the end of a file from its final characters (the whole content
    works too). Empty content is never an issue.
    """
    if not tail:
        return None
    if not tail.endswith("\n"):
        return Issue(IssueKind.missing_newline, None, MISSING_NEWLINE_MESSAGE)
    if tail.endswith("\n\n") or tail.endswith("\n\r\n"):
        return Issue(IssueKind.multiple_newlines, None, MULTIPLE_NEWLINES_MESSAGE)
    return None


@dataclass
class LineScan:
    issues: list[Issue]
    lines_seen: int
    complete: bool


def decode_lines(raw_lines: Iterable[bytes]) -> Iterator[str]:
    """
    Decode raw lines as UTF-8 one at a time, so an invalid byte raises
    `UnicodeDecodeError` at the line that contains it and not earlier.
    """
    for raw_line in raw_lines:
        yield raw_line.decode("utf-8")


def scan_lines(lines: Iterable[str]) -> LineScan:
    """
    Apply the trailing-space rule to each line. A decode or I/O error while
    reading stops the scan and keeps what was found so far.
    """
    issues: list[Issue] = []
    count = 0
    try:
        for count, raw_line in enumerate(lines, start=1):
            issue = trailing_space_issue(raw_line, count)
            if issue is not None:
                issues.append(issue)
    except (UnicodeDecodeError, OSError) as e:
        logger.debug("Stopped reading after line %d: %s", count, e)
        return LineScan(issues, count, complete=False)
    return LineScan(issues, count, complete=True)


def classify(lines: Iterable[str], read_tail: Callable[[], str], checks: CheckConfig) -> list[Issue]:
    """
    Run all enabled rules. Trailing-space issues come first in line order,
    then at most one newline-ending issue. A disabled rule reads nothing.
    """
    issues: list[Issue] = []

    if checks.trailing_spaces:
        scan = scan_lines(lines)
        issues.extend(scan.issues)
        if scan.lines_seen == 0:
            # Empty, or unreadable from the first line on.
            return issues

    if checks.newline_ending:
        issue = newline_ending_issue(read_tail())
        if issue is not None:
            issues.append(issue)

    return issues
