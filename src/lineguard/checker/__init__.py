"""
Whitespace checks for file contents: trailing spaces on lines, and a missing or
duplicated newline at the end of the file.

Usage::

    from pathlib import Path

    from lineguard.checker import ContentChecker
    from lineguard.config import Config

    result = ContentChecker(Config()).check(Path("README.md"))
    for issue in result.issues:
        print(issue.line, issue.message)
"""

from lineguard.checker.file_checker import (
    STREAMING_THRESHOLD,
    ContentChecker,
    check_files,
)
from lineguard.checker.types import CheckResult, Issue, IssueKind

__all__ = [
    "STREAMING_THRESHOLD",
    "CheckResult",
    "ContentChecker",
    "Issue",
    "IssueKind",
    "check_files",
]
