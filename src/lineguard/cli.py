#!/usr/bin/env python3
"""
lineguard: Lint files for trailing whitespace and end-of-file newlines

Common usage:
  lineguard README.md src/*.py
  lineguard -r .
  lineguard -r --fix .
  git ls-files | lineguard --stdin
  lineguard -r --from origin/main .

Exit codes: 0 = no issues, 1 = issues found, 3 = file discovery failed,
4 = configuration could not be loaded.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from lineguard.checker import CheckResult, check_files
from lineguard.checker.file_checker import describe_error
from lineguard.config import Config, ConfigError, apply_cli_overrides, resolve_config
from lineguard.discovery import Discoverer, DiscoveryError, DiscoveryOptions, GitRangeInfo
from lineguard.fixer import FixResult, fix_file
from lineguard.reporters import OutputFormat, get_reporter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ISSUES = 1
EXIT_DISCOVERY_ERROR = 3
EXIT_CONFIG_ERROR = 4


@dataclass
class Options:
    """Command-line options for the lineguard tool."""

    files: list[str]
    stdin: bool
    recursive: bool
    format: OutputFormat
    quiet: bool
    verbose: bool
    config: Path | None
    ignore: list[str]
    extensions: list[str] | None
    no_newline_check: bool
    no_trailing_space: bool
    fix: bool
    dry_run: bool
    from_ref: str | None
    to_ref: str | None
    no_hidden: bool
    jobs: int | None
    version: bool


def _split_extensions(value: str) -> list[str]:
    return [ext for ext in value.split(",") if ext.strip()]


def _parse_args(args: list[str] | None = None) -> Options:
    """Parse command-line arguments."""
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="lineguard",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Files, directories, or glob patterns to check",
    )
    parser.add_argument("--stdin", action="store_true", help="Read file paths from stdin")
    parser.add_argument(
        "-r", "--recursive", action="store_true", help="Recursively check directories"
    )
    parser.add_argument(
        "-f",
        "--format",
        type=str,
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.human.value,
        help="Output format (default: %(default)s)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress non-error output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed information")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to configuration file (default: search for .lineguardrc upward)",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Ignore files matching pattern. Can be repeated; replaces configured patterns",
    )
    parser.add_argument(
        "--extensions",
        type=_split_extensions,
        default=None,
        metavar="LIST",
        help="File extensions to check (comma-separated, e.g. 'py,md')",
    )
    parser.add_argument(
        "--no-newline-check", action="store_true", help="Disable newline ending check"
    )
    parser.add_argument(
        "--no-trailing-space", action="store_true", help="Disable trailing space check"
    )
    parser.add_argument("--fix", action="store_true", help="Automatically fix issues")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="With --fix, show what would be fixed without modifying files",
    )
    parser.add_argument(
        "--from",
        dest="from_ref",
        metavar="REF",
        help="Check only files changed since this commit (Git only)",
    )
    parser.add_argument(
        "--to",
        dest="to_ref",
        metavar="REF",
        help="Check files changed until this commit (Git only, default: HEAD)",
    )
    parser.add_argument(
        "--no-hidden",
        action="store_true",
        help="Skip hidden files found in directories or globs (files starting with .)",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        metavar="N",
        help="Number of files to check in parallel (default: based on CPU count)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    return Options(
        files=opts.files,
        stdin=opts.stdin,
        recursive=opts.recursive,
        format=OutputFormat(opts.format),
        quiet=opts.quiet,
        verbose=opts.verbose,
        config=opts.config,
        ignore=opts.ignore,
        extensions=opts.extensions,
        no_newline_check=opts.no_newline_check,
        no_trailing_space=opts.no_trailing_space,
        fix=opts.fix,
        dry_run=opts.dry_run,
        from_ref=opts.from_ref,
        to_ref=opts.to_ref,
        no_hidden=opts.no_hidden,
        jobs=opts.jobs,
        version=opts.version,
    )


_log_handler: logging.Handler | None = None


def _setup_logging(options: Options) -> None:
    global _log_handler
    level = logging.WARNING
    if options.verbose:
        level = logging.DEBUG
    elif options.quiet:
        level = logging.ERROR

    package_logger = logging.getLogger("lineguard")
    package_logger.setLevel(level)
    if _log_handler is not None:
        package_logger.removeHandler(_log_handler)
    _log_handler = logging.StreamHandler(sys.stderr)
    _log_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    package_logger.addHandler(_log_handler)


def _print_git_range(git_range: GitRangeInfo, quiet: bool) -> None:
    print(f"Git range: {git_range.from_hash[:7]}..{git_range.to_hash[:7]}")
    print(f"Changed files: {len(git_range.changed_files)}")
    if not quiet:
        for path in git_range.changed_files:
            print(f"  - {path}")
        print()


FixOutcome = tuple[CheckResult, FixResult | None, str | None]


def _report_fix_results(outcomes: list[FixOutcome], options: Options) -> int:
    """Print what was fixed and return the number of files that failed."""
    fixed_count = 0
    error_count = 0

    for _check_result, fix_result, error in outcomes:
        if error is not None:
            error_count += 1
            if not options.quiet:
                print(error, file=sys.stderr)
        elif fix_result is not None and fix_result.fixed:
            fixed_count += 1
            if not options.quiet and options.format == OutputFormat.human:
                verb = "Would fix" if options.dry_run else "Fixed"
                print(f"{verb}: {fix_result.file_path}")

    if not options.quiet and options.format == OutputFormat.human and fixed_count > 0:
        verb = "Would fix" if options.dry_run else "Fixed"
        plural = "" if fixed_count == 1 else "s"
        print(f"\n{verb} {fixed_count} file{plural}")

    if error_count > 0 and not options.quiet:
        plural = "" if error_count == 1 else "s"
        print(f"\n{error_count} error{plural} occurred", file=sys.stderr)
    return error_count


def _run_fixes(results: list[CheckResult], options: Options, config: Config) -> list[FixOutcome]:
    """Fix each file that has issues. Files that failed to check are carried over as errors."""
    outcomes: list[FixOutcome] = []
    for result in results:
        if result.error is not None:
            outcomes.append((result, None, result.error))
            continue
        if not result.issues:
            outcomes.append((result, None, None))
            continue
        try:
            fix_result = fix_file(result.file_path, result.issues, config, options.dry_run)
        except (OSError, UnicodeDecodeError) as e:
            outcomes.append((result, None, describe_error(result.file_path, e)))
            continue
        outcomes.append((result, fix_result, None))
    return outcomes


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the lineguard CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 no issues, 1 issues found, 3 discovery error, 4 config error)
    """
    options = _parse_args(args)

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("lineguard")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return EXIT_OK

    _setup_logging(options)

    # Load config and apply CLI overrides
    try:
        config = resolve_config(options.config, Path.cwd())
    except ConfigError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    config = apply_cli_overrides(
        config,
        ignore=options.ignore,
        extensions=options.extensions,
        no_newline_check=options.no_newline_check,
        no_trailing_space=options.no_trailing_space,
    )

    # Discover files to check
    discovery_options = DiscoveryOptions(
        files=options.files,
        recursive=options.recursive,
        skip_hidden=options.no_hidden,
        read_stdin=options.stdin,
        git_from=options.from_ref,
        git_to=options.to_ref,
    )
    try:
        discovery = Discoverer(config).discover(discovery_options)
    except DiscoveryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DISCOVERY_ERROR

    if options.verbose and discovery.git_range is not None:
        _print_git_range(discovery.git_range, options.quiet)

    files = discovery.files
    logger.debug("Discovered %d files", len(files))
    if not files:
        if not options.quiet:
            print("No files found to check", file=sys.stderr)
        return EXIT_OK

    if not options.quiet and options.format == OutputFormat.human and len(files) > 1:
        if options.fix and options.dry_run:
            print(f"Checking {len(files)} files (dry run)...")
        elif options.fix:
            print(f"Fixing {len(files)} files...")
        else:
            print(f"Checking {len(files)} files...")

    results = check_files(files, config, jobs=options.jobs)

    if options.fix:
        outcomes = _run_fixes(results, options, config)
        failed = _report_fix_results(outcomes, options)
        return EXIT_ISSUES if failed else EXIT_OK

    # Per-file errors go to stderr but don't affect the exit code
    if not options.quiet:
        for result in results:
            if result.error is not None:
                print(result.error, file=sys.stderr)

    has_issues = any(r.has_issues for r in results)
    if not options.quiet or has_issues:
        get_reporter(options.format).report(results, sys.stdout)

    return EXIT_ISSUES if has_issues else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
