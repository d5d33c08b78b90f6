"""
Extensions of files that are never checked.

These are compared against the lowercased extension without its dot, and win
over any configured extension allow-list.
"""

from __future__ import annotations

BINARY_EXTENSIONS: frozenset[str] = frozenset(
    [
        # Images
        "jpg",
        "jpeg",
        "png",
        "gif",
        "bmp",
        "ico",
        "svg",
        "webp",
        # Audio/Video
        "mp3",
        "mp4",
        "avi",
        "mov",
        "wmv",
        "flv",
        "webm",
        # Archives
        "zip",
        "tar",
        "gz",
        "bz2",
        "xz",
        "7z",
        "rar",
        # Executables/Libraries
        "exe",
        "dll",
        "so",
        "dylib",
        "a",
        "o",
        # Binary data
        "bin",
        "dat",
        "db",
        "sqlite",
        # Documents
        "pdf",
        "doc",
        "docx",
        "xls",
        "xlsx",
        # Java
        "class",
        "jar",
        "war",
        # Python
        "pyc",
        "pyo",
        # Fonts
        "woff",
        "woff2",
        "ttf",
        "otf",
        "eot",
    ]
)
