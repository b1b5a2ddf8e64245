"""
Version information for swagcomment package.

This module provides semantic versioning information following PEP 440.
"""

from __future__ import annotations

VERSION_MAJOR = 0
VERSION_MINOR = 3
VERSION_PATCH = 0
VERSION_SUFFIX = ""  # e.g., "a1", "b2", "rc1", or "" for final

__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"
if VERSION_SUFFIX:
    __version__ += VERSION_SUFFIX


def get_version() -> str:
    """Return the current version string."""
    return __version__


__all__ = [
    "__version__",
    "get_version",
]
