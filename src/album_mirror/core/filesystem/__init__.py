"""Filesystem module.

Resolves the album directories of a source tree.
"""

from .layout import LayoutKind, detect_layout, resolve_album_directories

__all__ = [
    "LayoutKind",
    "detect_layout",
    "resolve_album_directories",
]
