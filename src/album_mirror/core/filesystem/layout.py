"""Detect how a source tree lays out its albums.

Each top-level directory of the source is either an album itself (flat layout)
or a container whose subdirectories are albums (nested layout, for example
``<source>/<artist>/<album>``). The layout is chosen per top-level entry, so
both kinds can be mixed in one source tree.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List

from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class LayoutKind(str, Enum):
    """Layout of one top-level source directory."""

    FLAT = "flat"  # the directory itself is an album
    NESTED = "nested"  # every subdirectory is an album


def _subdirectories(directory: Path) -> List[Path]:
    return [entry for entry in directory.iterdir() if entry.is_dir()]


def detect_layout(directory: Path) -> LayoutKind:
    """Nested if ``directory`` has at least one subdirectory, else flat."""
    if any(entry.is_dir() for entry in directory.iterdir()):
        return LayoutKind.NESTED
    return LayoutKind.FLAT


def resolve_album_directories(source: Path) -> List[Path]:
    """List album directories of ``source`` in directory-listing order.

    Raises:
        ConfigurationError: If ``source`` is not a directory
    """
    if not source.is_dir():
        raise ConfigurationError(f"Source directory does not exist: {source}")

    albums: List[Path] = []
    for entry in _subdirectories(source):
        layout = detect_layout(entry)
        logger.debug("%s: %s layout", entry, layout.value)
        if layout == LayoutKind.NESTED:
            albums.extend(_subdirectories(entry))
        else:
            albums.append(entry)
    return albums
