"""Issue and result types produced by the content checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class IssueKind(str, Enum):
    missing_newline = "missing_newline"
    multiple_newlines = "multiple_newlines"
    trailing_space = "trailing_space"

    @property
    def is_newline_ending(self) -> bool:
        return self in (IssueKind.missing_newline, IssueKind.multiple_newlines)


@dataclass(frozen=True)
class Issue:
    """
    One defect in a file. `line` is 1-based and only set for trailing-space
    issues; newline-ending issues apply to the file as a whole.
    """

    kind: IssueKind
    line: int | None
    message: str


@dataclass
class CheckResult:
    """
    Outcome of checking one file. When `error` is set the file couldn't be
    checked and `issues` is empty.
    """

    file_path: Path
    issues: list[Issue] = field(default_factory=list)
    error: str | None = None

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)
