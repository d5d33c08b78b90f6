"""CLI integration tests: discovery, checking, reporting, and fixing end to end."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from lineguard import cli
from lineguard.cli import EXIT_CONFIG_ERROR, EXIT_DISCOVERY_ERROR, EXIT_ISSUES, EXIT_OK, main


@pytest.fixture(autouse=True)
def _detach_cli_logging() -> Iterator[None]:
    """Drop the handler `main` installs, since it holds the captured stderr."""
    yield
    if cli._log_handler is not None:  # pyright: ignore[reportPrivateUsage]
        logging.getLogger("lineguard").removeHandler(cli._log_handler)  # pyright: ignore
        cli._log_handler = None  # pyright: ignore[reportPrivateUsage]
    logging.getLogger("lineguard").setLevel(logging.NOTSET)


def _make_tree(root: Path) -> None:
    """Create a small project tree with one clean and one dirty file."""
    (root / "README.md").write_text("# Root\n")
    src = root / "src"
    src.mkdir()
    (src / "app.py").write_text("x = 1   \nprint(x)")
    nm = root / "node_modules" / "pkg"
    nm.mkdir(parents=True)
    (nm / "index.js").write_text("dirty  \n\n\n")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n  ")


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    _make_tree(tmp_path)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_clean_files_exit_ok(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["README.md"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "✓ All files passed lint checks!" in out
    assert "Files checked: 1" in out


def test_issues_exit_one(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-r", "--ignore", "node_modules", "."]) == EXIT_ISSUES
    out = capsys.readouterr().out
    assert "Checking 2 files..." in out
    assert "✗ src/app.py" in out
    assert "  - Line 1: Trailing spaces found" in out
    assert "  - Missing newline at end of file" in out
    assert "✗ Found 2 issues in 1 files" in out
    assert "logo.png" not in out


def test_non_recursive_directory(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["."]) == EXIT_OK
    assert "Files checked: 1" in capsys.readouterr().out


def test_json_output(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--format", "json", "src/app.py", "README.md"]) == EXIT_ISSUES
    data = json.loads(capsys.readouterr().out)
    assert data["files_checked"] == 2
    assert data["total_issues"] == 2
    assert data["issues"][0]["file"] == "src/app.py"
    assert [i["type"] for i in data["issues"][0]["issues"]] == [
        "trailing_space",
        "missing_newline",
    ]


def test_github_output(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-f", "github", "src/app.py"]) == EXIT_ISSUES
    out = capsys.readouterr().out
    assert "::error file=src/app.py,line=1::Trailing spaces found" in out


def test_quiet_clean_prints_nothing(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-q", "README.md"]) == EXIT_OK
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_quiet_still_reports_issues(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-q", "src/app.py"]) == EXIT_ISSUES
    assert "src/app.py" in capsys.readouterr().out


def test_disable_checks(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--no-trailing-space", "--no-newline-check", "src/app.py"]) == EXIT_OK
    assert main(["--no-newline-check", "src/app.py"]) == EXIT_ISSUES
    out = capsys.readouterr().out
    assert "Missing newline" not in out


def test_no_files_found(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["does-not-exist.txt"]) == EXIT_OK
    assert "No files found to check" in capsys.readouterr().err


def test_extensions_filter(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-r", "--extensions", "md", "--ignore", "node_modules", "."]) == EXIT_OK
    assert "Files checked: 1" in capsys.readouterr().out


def test_config_file_ignore_patterns(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / ".lineguardrc").write_text('ignore_patterns = ["node_modules", "src"]\n')
    assert main(["-r", "."]) == EXIT_OK
    out = capsys.readouterr().out
    # README.md and .lineguardrc itself
    assert "Files checked: 2" in out


def test_cli_ignore_replaces_config(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / ".lineguardrc").write_text('ignore_patterns = ["src", "node_modules"]\n')
    assert main(["-r", "--ignore", "node_modules", "."]) == EXIT_ISSUES
    assert "src/app.py" in capsys.readouterr().out


def test_config_disables_check(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "lineguard.toml").write_text("[checks]\ntrailing_spaces = false\n")
    assert main(["src/app.py"]) == EXIT_ISSUES
    out = capsys.readouterr().out
    assert "Trailing spaces" not in out
    assert "Missing newline" in out


def test_invalid_config_exit_code(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / ".lineguardrc").write_text("ignore_patterns = [\n")
    assert main(["README.md"]) == EXIT_CONFIG_ERROR
    assert "Error loading configuration" in capsys.readouterr().err


def test_missing_explicit_config(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-c", "nope.toml", "README.md"]) == EXIT_CONFIG_ERROR
    assert "not found" in capsys.readouterr().err


def test_git_range_outside_repository(
    project: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(project.parent))
    assert main(["--from", "HEAD~1", "README.md"]) == EXIT_DISCOVERY_ERROR
    assert "Error:" in capsys.readouterr().err


def test_stdin_file_list(
    project: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("README.md\nsrc/app.py\n"))
    assert main(["--stdin"]) == EXIT_ISSUES
    out = capsys.readouterr().out
    assert "Files checked: 2" in out


def test_unreadable_file_reported_but_not_fatal(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (project / "latin1.txt").write_bytes(b"caf\xe9\n")
    assert main(["latin1.txt", "README.md"]) == EXIT_OK
    captured = capsys.readouterr()
    assert "latin1.txt" in captured.err
    assert "✓ All files passed lint checks!" in captured.out


def test_fix(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    app = project / "src" / "app.py"
    assert main(["--fix", "src/app.py", "README.md"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Fixed: src/app.py" in out
    assert "Fixed 1 file" in out
    assert app.read_text() == "x = 1\nprint(x)\n"
    assert main(["src/app.py"]) == EXIT_OK


def test_fix_dry_run(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    app = project / "src" / "app.py"
    assert main(["--fix", "--dry-run", "src/app.py"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Would fix: src/app.py" in out
    assert app.read_text() == "x = 1   \nprint(x)"


def test_fix_reports_unreadable_files(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "latin1.txt").write_bytes(b"caf\xe9 \n")
    assert main(["--fix", "latin1.txt"]) == EXIT_ISSUES
    err = capsys.readouterr().err
    assert "latin1.txt" in err
    assert "1 error occurred" in err


def test_verbose_logs_discovery(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-v", "README.md"]) == EXIT_OK
    assert "Discovered 1 files" in capsys.readouterr().err
