"""Artwork module.

Resolves missing album covers and artist pictures through Tidal and
MusicBrainz/Cover Art Archive.
"""

from .base import (
    ArtworkError,
    ArtworkProvider,
    ArtworkRequest,
    ArtworkResult,
    FetchOutcome,
    OutcomeStatus,
)
from .musicbrainz import MusicBrainzCoverProvider, sanitize_query_term
from .resolver import ArtworkResolver
from .tidal import TidalArtworkProvider, extract_album_id

__all__ = [
    "ArtworkError",
    "ArtworkProvider",
    "ArtworkRequest",
    "ArtworkResult",
    "ArtworkResolver",
    "FetchOutcome",
    "OutcomeStatus",
    "MusicBrainzCoverProvider",
    "TidalArtworkProvider",
    "extract_album_id",
    "sanitize_query_term",
]
