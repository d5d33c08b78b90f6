"""
TOML-based config file loading for lineguard.

Searches for `.lineguardrc`, `lineguard.toml`, or `pyproject.toml [tool.lineguard]`
walking up from the current directory. Config values are combined with CLI flags
using precedence: explicit CLI flags > config file > built-in defaults.

A config file looks like::

    ignore_patterns = ["*.generated.*", "vendor"]
    file_extensions = ["py", "md"]

    [checks]
    newline_ending = true
    trailing_spaces = true
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


class ConfigError(Exception):
    """A config file could not be found, read, or validated."""


@dataclass(frozen=True)
class CheckConfig:
    """Which checks are enabled."""

    newline_ending: bool = True
    trailing_spaces: bool = True


@dataclass(frozen=True)
class Config:
    """
    Effective configuration for one run. Immutable: overrides produce a new value.

    An empty `file_extensions` set means there is no extension allow-list.
    Extensions are stored lowercase and without a leading dot.
    """

    checks: CheckConfig = field(default_factory=CheckConfig)
    ignore_patterns: tuple[str, ...] = ()
    file_extensions: frozenset[str] = frozenset()


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".lineguardrc", "lineguard.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "ignore-patterns": "ignore_patterns",
    "file-extensions": "file_extensions",
    "newline-ending": "newline_ending",
    "trailing-spaces": "trailing_spaces",
}


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lowercase extensions and drop any leading dot (`.PY` -> `py`)."""
    return frozenset(ext.strip().lstrip(".").lower() for ext in extensions if ext.strip())


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.lineguardrc` >
    `lineguard.toml` > `pyproject.toml` (only if it has `[tool.lineguard]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    # Only use pyproject.toml if it has [tool.lineguard]
                    if _pyproject_has_lineguard_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_lineguard_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.lineguard] section."""
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        return "lineguard" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError):
        return False


def load_config(config_path: Path) -> Config:
    """
    Load a `Config` from a TOML file. Supports `.lineguardrc`, `lineguard.toml`
    and `pyproject.toml` (extracts `[tool.lineguard]`). Raises `ConfigError`
    if the file can't be read or contains invalid values.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("lineguard", {})

    return _parse_config_data(data, config_path)


def _snake(key: str) -> str:
    return _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))


def _parse_config_data(data: dict[str, Any], source: Path) -> Config:
    """Parse a TOML dict into a `Config`, validating value types."""
    top = {_snake(k): v for k, v in data.items()}

    checks_data = top.get("checks", {})
    if not isinstance(checks_data, dict):
        raise ConfigError(f"{source}: `checks` must be a table")
    checks = {_snake(k): v for k, v in cast(dict[str, Any], checks_data).items()}

    check_kwargs: dict[str, bool] = {}
    for name in ("newline_ending", "trailing_spaces"):
        if name in checks:
            value = checks[name]
            if not isinstance(value, bool):
                raise ConfigError(f"{source}: `checks.{name}` must be true or false")
            check_kwargs[name] = value

    ignore_patterns = _string_list(top.get("ignore_patterns", []), "ignore_patterns", source)
    file_extensions = _string_list(top.get("file_extensions", []), "file_extensions", source)

    return Config(
        checks=CheckConfig(**check_kwargs),
        ignore_patterns=tuple(ignore_patterns),
        file_extensions=normalize_extensions(file_extensions),
    )


def _string_list(value: Any, name: str, source: Path) -> list[str]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in cast(list[Any], value)
    ):
        raise ConfigError(f"{source}: `{name}` must be a list of strings")
    return cast(list[str], value)


def resolve_config(explicit_path: Path | None, start_dir: Path) -> Config:
    """
    Load the config for a run: the explicit file if given (it must exist),
    else the first config file found walking up from `start_dir`, else defaults.
    """
    if explicit_path is not None:
        if not explicit_path.is_file():
            raise ConfigError(f"Configuration file not found: {explicit_path}")
        return load_config(explicit_path)

    found = find_config_file(start_dir)
    if found is None:
        return Config()
    return load_config(found)


def apply_cli_overrides(
    config: Config,
    ignore: Sequence[str] | None = None,
    extensions: Sequence[str] | None = None,
    no_newline_check: bool = False,
    no_trailing_space: bool = False,
) -> Config:
    """
    Return a new `Config` with CLI settings applied on top of `config`.

    CLI ignore patterns, when any are given, replace the configured list
    entirely. CLI extensions likewise replace the configured set.
    """
    result = config
    if ignore:
        result = replace(result, ignore_patterns=tuple(ignore))
    if extensions is not None:
        result = replace(result, file_extensions=normalize_extensions(extensions))
    if no_newline_check or no_trailing_space:
        checks = replace(
            result.checks,
            newline_ending=result.checks.newline_ending and not no_newline_check,
            trailing_spaces=result.checks.trailing_spaces and not no_trailing_space,
        )
        result = replace(result, checks=checks)
    return result
