"""Models for the album mirror."""

from .models import (
    AUDIO_EXTENSIONS,
    AlbumDirectory,
    AlbumMetadata,
    ArtworkState,
    Credentials,
    SyncKind,
    SyncResult,
)

__all__ = [
    "AUDIO_EXTENSIONS",
    "AlbumDirectory",
    "AlbumMetadata",
    "ArtworkState",
    "Credentials",
    "SyncKind",
    "SyncResult",
]
