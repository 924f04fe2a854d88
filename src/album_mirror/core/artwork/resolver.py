"""Decide which artwork an album is missing and resolve it through providers."""

import logging
from pathlib import Path
from typing import Optional

from ...config import AuthCoverPolicy
from ...exceptions import ArtworkFetchFailure
from ...models import AlbumMetadata, ArtworkState
from ..http import FetchErrorKind
from .base import (
    ArtworkError,
    ArtworkProvider,
    ArtworkRequest,
    ArtworkResult,
    OutcomeStatus,
)

logger = logging.getLogger(__name__)


class ArtworkResolver:
    """Runs the authenticated provider first and the open provider as fallback.

    Only the album cover has a fallback; a missing artist picture is only ever
    looked up on the authenticated provider.
    """

    def __init__(
        self,
        authenticated_provider: ArtworkProvider,
        fallback_provider: ArtworkProvider,
        auth_cover_policy: AuthCoverPolicy = AuthCoverPolicy.LOG,
    ) -> None:
        """Initialize the resolver.

        Args:
            authenticated_provider: Provider used when an access token is present
            fallback_provider: Provider used when no cover was obtained
            auth_cover_policy: Handling of a token that yielded no cover
        """
        self.authenticated_provider = authenticated_provider
        self.fallback_provider = fallback_provider
        self.auth_cover_policy = auth_cover_policy

    def resolve(
        self,
        metadata: AlbumMetadata,
        state: ArtworkState,
        album_path: Path,
        access_token: Optional[str],
        fetch_covers: bool,
    ) -> ArtworkResult:
        """Fetch missing artwork for one album.

        Args:
            metadata: Tags of the album
            state: Artwork already present in the album directory
            album_path: Album directory images are written into
            access_token: Tidal bearer token, if any
            fetch_covers: Whether artwork fetching is enabled at all

        Returns:
            ArtworkResult with written files and non-fatal errors

        Raises:
            ArtworkFetchFailure: Only under the strict policy, when a token was
                supplied but Tidal produced no cover
        """
        result = ArtworkResult()
        if not fetch_covers or not state.needs_artwork:
            return result

        request = ArtworkRequest(
            metadata=metadata,
            state=state,
            album_path=album_path,
            access_token=access_token,
        )

        self._run_provider(self.authenticated_provider, request, result)

        if state.has_album_cover or result.cover_written:
            return result

        if access_token is not None:
            self._handle_missing_authenticated_cover(album_path, result)

        self._run_provider(self.fallback_provider, request, result)
        if not result.cover_written:
            logger.warning("No cover found for %s", album_path)
        return result

    def _run_provider(
        self,
        provider: ArtworkProvider,
        request: ArtworkRequest,
        result: ArtworkResult,
    ) -> None:
        for outcome in provider.fetch(request):
            if outcome.status == OutcomeStatus.FOUND:
                result.written_files.append(outcome.value)
            elif outcome.status == OutcomeStatus.NOT_FOUND:
                logger.debug(
                    "%s: %s (%s)", provider.name, outcome.reason, request.album_path
                )
            else:
                logger.error(
                    "%s artwork lookup failed for %s: %s",
                    provider.name,
                    request.album_path,
                    outcome.reason,
                )
                result.errors.append(
                    ArtworkError(
                        provider=provider.name,
                        kind=outcome.kind or FetchErrorKind.TRANSPORT,
                        message=outcome.reason,
                    )
                )

    def _handle_missing_authenticated_cover(
        self, album_path: Path, result: ArtworkResult
    ) -> None:
        message = f"Failed to fetch Tidal cover for {album_path}"
        if self.auth_cover_policy == AuthCoverPolicy.STRICT:
            raise ArtworkFetchFailure(message, kind=FetchErrorKind.NO_COVER.value)
        logger.error("%s, falling back to MusicBrainz", message)
        result.errors.append(
            ArtworkError(
                provider=self.authenticated_provider.name,
                kind=FetchErrorKind.NO_COVER,
                message=message,
            )
        )
