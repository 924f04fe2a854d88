"""MusicBrainz release search + Cover Art Archive as the open cover provider."""

import logging
import re
from pathlib import Path
from typing import List

from ..http import FetchErrorKind
from .base import ArtworkProvider, ArtworkRequest, FetchOutcome, first_item, read_string

logger = logging.getLogger(__name__)

MUSICBRAINZ_RELEASE_SEARCH = (
    "https://musicbrainz.org/ws/2/release/"
    "?query=artist:{artist}%20AND%20title:{album}%20AND%20packaging:None"
)
COVER_ART_ARCHIVE_RELEASE = "https://coverartarchive.org/release/{release_id}"

_UNSAFE_QUERY_CHARS = re.compile(r"[^A-Za-z0-9 _]")


def sanitize_query_term(value: str) -> str:
    """Strip everything but letters, digits, space and underscore; encode spaces."""
    return _UNSAFE_QUERY_CHARS.sub("", value).replace(" ", "%20")


def image_extension(url: str) -> FetchOutcome:
    """Extension of an image URL: everything after its last '.'."""
    index = url.rfind(".")
    if index == -1 or index == len(url) - 1:
        return FetchOutcome.error(
            FetchErrorKind.MISSING_FIELD, f"Image URL has no extension: {url}"
        )
    return FetchOutcome.found(url[index + 1 :])


class MusicBrainzCoverProvider(ArtworkProvider):
    """Looks up a release by artist/title and saves its first archived image."""

    name = "musicbrainz"

    def fetch(self, request: ArtworkRequest) -> List[FetchOutcome]:
        """Download a cover for the album into ``cover.<ext>``."""
        metadata = request.metadata
        outcome = (
            self._search_release(metadata.artist, metadata.album)
            .then(self._first_image_url)
            .then(lambda url: self._download_cover(url, request.album_path))
        )
        return [outcome]

    def _search_release(self, artist: str, album: str) -> FetchOutcome:
        url = MUSICBRAINZ_RELEASE_SEARCH.format(
            artist=sanitize_query_term(artist), album=sanitize_query_term(album)
        )
        return (
            self.get_json(url)
            .then(lambda data: first_item(data, "releases"))
            .then(lambda release: read_string(release, "id"))
        )

    def _first_image_url(self, release_id: str) -> FetchOutcome:
        return (
            self.get_json(COVER_ART_ARCHIVE_RELEASE.format(release_id=release_id))
            .then(lambda data: first_item(data, "images"))
            .then(lambda image: read_string(image, "image"))
        )

    def _download_cover(self, url: str, album_path: Path) -> FetchOutcome:
        return image_extension(url).then(
            lambda extension: self.download(url, album_path / f"cover.{extension}")
        )
