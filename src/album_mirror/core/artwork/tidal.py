"""Tidal album API as an authenticated artwork provider."""

import logging
from typing import Iterable, List, Optional, Tuple

from ..http import HttpClient
from .base import ArtworkProvider, ArtworkRequest, FetchOutcome, read_string

logger = logging.getLogger(__name__)

TIDAL_ALBUM_PREFIXES: Tuple[str, ...] = (
    "https://listen.tidal.com/album/",
    "https://tidal.com/browse/album/",
    "https://tidal.com/album/",
)
TIDAL_ALBUM_API = "https://listen.tidal.com/v1/albums/{album_id}"
TIDAL_IMAGE_URL = "https://resources.tidal.com/images/{image_path}/{size}.jpg"

COVER_SIZE = "1280x1280"
ARTIST_PICTURE_SIZE = "750x750"


def extract_album_id(hint: Optional[str]) -> Optional[str]:
    """Return the Tidal album id embedded in a description/comment link.

    The id is the path segment right after a known prefix, up to the next '/'.
    """
    if not hint:
        return None
    for prefix in TIDAL_ALBUM_PREFIXES:
        if hint.startswith(prefix):
            album_id = hint[len(prefix) :].split("/", 1)[0]
            return album_id or None
    return None


def find_album_id(hints: Iterable[str]) -> Optional[str]:
    """First Tidal album id found in any of ``hints``."""
    for hint in hints:
        album_id = extract_album_id(hint)
        if album_id is not None:
            return album_id
    return None


def image_url(image_id: str, size: str) -> str:
    """Build a resources.tidal.com URL from a dash-separated image id."""
    return TIDAL_IMAGE_URL.format(image_path=image_id.replace("-", "/"), size=size)


class TidalArtworkProvider(ArtworkProvider):
    """Fetches album covers and artist pictures for albums linked to Tidal."""

    name = "tidal"

    def __init__(self, http_client: HttpClient, country_code: str = "US") -> None:
        """Initialize the provider.

        Args:
            http_client: Shared HTTP client
            country_code: Catalog country used for album lookups
        """
        super().__init__(http_client)
        self.country_code = country_code

    def fetch(self, request: ArtworkRequest) -> List[FetchOutcome]:
        """Download the missing artist picture and/or cover from Tidal."""
        if not request.access_token:
            return [FetchOutcome.not_found("no Tidal access token")]

        album_id = find_album_id(request.metadata.provider_hints)
        if album_id is None:
            return [FetchOutcome.not_found("no Tidal album link in tags")]

        album = self._fetch_album(album_id, request.access_token)
        if not album.is_found:
            return [album]

        outcomes = []
        if not request.state.has_artist_picture:
            outcomes.append(
                album.then(lambda data: read_string(data, "artist", "picture")).then(
                    lambda picture_id: self.download(
                        image_url(picture_id, ARTIST_PICTURE_SIZE),
                        request.album_path / "artist.jpg",
                    )
                )
            )
        if not request.state.has_album_cover:
            outcomes.append(
                album.then(lambda data: read_string(data, "cover")).then(
                    lambda cover_id: self.download(
                        image_url(cover_id, COVER_SIZE),
                        request.album_path / "cover.jpg",
                    )
                )
            )
        return outcomes

    def _fetch_album(self, album_id: str, access_token: str) -> FetchOutcome:
        return self.get_json(
            TIDAL_ALBUM_API.format(album_id=album_id),
            params={
                "countryCode": self.country_code,
                "locale": "en_US",
                "deviceType": "BROWSER",
            },
            headers={"Authorization": f"Bearer {access_token}"},
        )

    def __repr__(self) -> str:
        return f"TidalArtworkProvider(country_code={self.country_code!r})"
