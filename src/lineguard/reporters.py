"""
Output formats for check results: human-readable text, JSON, and GitHub Actions
annotations.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import Enum
from typing import Any, Protocol, TextIO

from lineguard.checker import CheckResult


class OutputFormat(str, Enum):
    human = "human"
    json = "json"
    github = "github"


class Reporter(Protocol):
    def report(self, results: Sequence[CheckResult], out: TextIO) -> None: ...


class HumanReporter:
    """Lists each file with issues, then a one-line summary."""

    def report(self, results: Sequence[CheckResult], out: TextIO) -> None:
        total_issues = 0
        files_with_issues = 0

        for result in results:
            if not result.has_issues:
                continue
            files_with_issues += 1
            total_issues += len(result.issues)

            out.write(f"✗ {result.file_path}\n")
            for issue in result.issues:
                if issue.line is not None:
                    out.write(f"  - Line {issue.line}: {issue.message}\n")
                else:
                    out.write(f"  - {issue.message}\n")
            out.write("\n")

        if total_issues == 0:
            out.write("✓ All files passed lint checks!\n")
        else:
            out.write(f"✗ Found {total_issues} issues in {files_with_issues} files\n")
        out.write(f"  Files checked: {len(results)}\n")


class JsonReporter:
    """
    A single JSON object with totals, the issues grouped by file, and an
    `errors` list only when some files couldn't be checked.
    """

    def __init__(self, pretty: bool = True) -> None:
        self.pretty: bool = pretty

    def report(self, results: Sequence[CheckResult], out: TextIO) -> None:
        issues: list[dict[str, Any]] = []
        errors: list[dict[str, str]] = []

        for result in results:
            if result.error is not None:
                errors.append({"file": str(result.file_path), "error": result.error})
            if result.issues:
                issues.append(
                    {
                        "file": str(result.file_path),
                        "issues": [
                            {"type": issue.kind.value, "line": issue.line, "message": issue.message}
                            for issue in result.issues
                        ],
                    }
                )

        data: dict[str, Any] = {
            "files_checked": len(results),
            "files_with_issues": sum(1 for r in results if r.has_issues),
            "total_issues": sum(len(r.issues) for r in results),
            "issues": issues,
        }
        if errors:
            data["errors"] = errors

        out.write(json.dumps(data, indent=2 if self.pretty else None, ensure_ascii=False))
        out.write("\n")


class GitHubReporter:
    """GitHub Actions `::error` workflow commands, one per issue."""

    def report(self, results: Sequence[CheckResult], out: TextIO) -> None:
        for result in results:
            if result.error is not None:
                out.write(f"::error file={result.file_path}::{result.error}\n")
            for issue in result.issues:
                if issue.line is not None:
                    out.write(f"::error file={result.file_path},line={issue.line}::{issue.message}\n")
                else:
                    out.write(f"::error file={result.file_path}::{issue.message}\n")


def get_reporter(output_format: OutputFormat) -> Reporter:
    if output_format == OutputFormat.json:
        return JsonReporter()
    if output_format == OutputFormat.github:
        return GitHubReporter()
    return HumanReporter()
