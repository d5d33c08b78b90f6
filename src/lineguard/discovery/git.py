"""Changed-file lookup between two git revisions, via the `git` command line."""

from __future__ import annotations

import subprocess
from pathlib import Path

from lineguard.discovery.types import DiscoveryError, GitRangeInfo


class GitError(DiscoveryError):
    """A git operation needed for discovery failed."""


class NotARepositoryError(GitError):
    pass


class UnresolvableReferenceError(GitError):
    pass


class GitRangeFilter:
    """
    Resolves revisions and lists the files changed between them, for the
    repository containing `cwd`.

    Both ends of a range are resolved to commit hashes before diffing, so a
    branch that moves during the run doesn't change the comparison.
    """

    def __init__(self, cwd: Path | None = None, git: str = "git") -> None:
        self._cwd: Path = cwd if cwd is not None else Path.cwd()
        self._git: str = git

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                [self._git, *args],
                cwd=self._cwd,
                text=True,
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError(f"git executable not found: {self._git}") from e
        except OSError as e:
            raise GitError(f"Failed to run git: {e}") from e

    def toplevel(self) -> Path:
        """Root of the work tree. Raises `NotARepositoryError` outside a repository."""
        proc = self._run("rev-parse", "--show-toplevel")
        if proc.returncode != 0 or not proc.stdout.strip():
            raise NotARepositoryError(f"Not a git repository: {self._cwd}")
        return Path(proc.stdout.strip())

    def resolve(self, reference: str) -> str:
        """Resolve a branch, tag, `HEAD~n`, or hash to a full commit hash."""
        self.toplevel()
        proc = self._run("rev-parse", "--verify", "--quiet", f"{reference}^{{commit}}")
        commit_hash = proc.stdout.strip()
        if proc.returncode != 0 or not commit_hash:
            raise UnresolvableReferenceError(f"Invalid git reference: {reference}")
        return commit_hash

    def changed_files(self, from_hash: str, to_hash: str) -> list[Path]:
        """
        Files that differ between two commits and currently exist as regular
        files in the work tree, as absolute paths.
        """
        root = self.toplevel()
        proc = self._run("diff", "--name-only", "-z", from_hash, to_hash)
        if proc.returncode != 0:
            raise GitError(f"Failed to get changed files: {proc.stderr.strip()}")

        files: list[Path] = []
        for name in proc.stdout.split("\0"):
            if not name:
                continue
            path = root / name
            if path.is_file():
                files.append(path)
        return files

    def range_info(self, from_ref: str, to_ref: str | None = None) -> GitRangeInfo:
        from_hash = self.resolve(from_ref)
        to_hash = self.resolve(to_ref or "HEAD")
        return GitRangeInfo(
            from_hash=from_hash,
            to_hash=to_hash,
            changed_files=self.changed_files(from_hash, to_hash),
        )
