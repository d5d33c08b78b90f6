"""
File discovery: turns paths, directories, glob patterns, a piped file list, or a
git revision range into the list of files to check.

Usage::

    from lineguard.config import Config
    from lineguard.discovery import Discoverer, DiscoveryOptions

    config = Config(ignore_patterns=("node_modules", "*.min.js"))
    discoverer = Discoverer(config)
    result = discoverer.discover(DiscoveryOptions(files=["src", "README.md"], recursive=True))
    for path in result.files:
        print(path)
"""

from lineguard.discovery.defaults import BINARY_EXTENSIONS
from lineguard.discovery.git import (
    GitError,
    GitRangeFilter,
    NotARepositoryError,
    UnresolvableReferenceError,
)
from lineguard.discovery.ignore import IgnoreMatcher
from lineguard.discovery.resolver import Discoverer, is_checkable_extension
from lineguard.discovery.types import (
    DiscoveryError,
    DiscoveryOptions,
    DiscoveryResult,
    GitRangeInfo,
)

__all__ = [
    "BINARY_EXTENSIONS",
    "Discoverer",
    "DiscoveryError",
    "DiscoveryOptions",
    "DiscoveryResult",
    "GitError",
    "GitRangeFilter",
    "GitRangeInfo",
    "IgnoreMatcher",
    "NotARepositoryError",
    "UnresolvableReferenceError",
    "is_checkable_extension",
]
