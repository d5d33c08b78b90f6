"""Packaging entrypoint tests."""

from __future__ import annotations

import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


def test_lineguard_entrypoint() -> None:
    """The lineguard script should point to the CLI entrypoint."""
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    scripts = data["project"]["scripts"]

    assert scripts == {"lineguard": "lineguard.cli:main"}


def test_entrypoint_is_importable() -> None:
    from lineguard.cli import main

    assert callable(main)
