"""Run the mirror over a whole source tree.

For every album directory the driver reads tags, lets the artwork resolver fill
in missing images and asks the reconciler to bring the target copy up to date.
Albums are processed strictly one after another in directory-listing order.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config import Config
from ..exceptions import AlbumSkipped, ConfigurationError
from ..models import (
    AlbumDirectory,
    AlbumMetadata,
    ArtworkState,
    Credentials,
    SyncResult,
)
from .artwork import (
    ArtworkError,
    ArtworkResolver,
    MusicBrainzCoverProvider,
    TidalArtworkProvider,
)
from .credentials import CredentialResolver
from .filesystem import resolve_album_directories
from .http import HttpClient
from .sync import SyncReconciler, count_files
from .tags import TagReader

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[AlbumDirectory, AlbumMetadata], None]


@dataclass
class SkippedAlbum:
    """An album directory that was not processed."""

    path: Path
    reason: str


@dataclass
class RunReport:
    """Everything that happened during one run."""

    results: List[SyncResult] = field(default_factory=list)
    skipped: List[SkippedAlbum] = field(default_factory=list)
    artwork_errors: List[Tuple[Path, ArtworkError]] = field(default_factory=list)
    artwork_written: List[Path] = field(default_factory=list)
    albums_processed: int = 0
    duration_ms: int = 0

    @property
    def is_up_to_date(self) -> bool:
        """Whether no album had to be created or updated."""
        return not self.results

    @property
    def failed_copies(self) -> List[Tuple[Path, str]]:
        """(target album, file name) for every file that failed to copy."""
        return [
            (result.target_path, name)
            for result in self.results
            for name in result.failed_files
        ]


class PipelineDriver:
    """Walks the source tree and mirrors each album."""

    def __init__(
        self,
        tag_reader: TagReader,
        artwork_resolver: ArtworkResolver,
        reconciler: SyncReconciler,
        target_directory: Optional[Path] = None,
        fetch_covers: bool = False,
        access_token: Optional[str] = None,
        audio_extensions: Tuple[str, ...] = Config.audio_extensions,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Initialize the driver.

        Args:
            tag_reader: Reads album metadata from an audio file
            artwork_resolver: Fetches missing artwork
            reconciler: Copies albums into the target library
            target_directory: Root of the target library; without it artwork is
                still written but nothing is copied
            fetch_covers: Whether to fetch missing artwork
            access_token: Tidal bearer token shared by the whole run
            audio_extensions: File suffixes that count as tracks
            progress: Called with each album before its artwork is resolved
        """
        self.tag_reader = tag_reader
        self.artwork_resolver = artwork_resolver
        self.reconciler = reconciler
        self.target_directory = target_directory
        self.fetch_covers = fetch_covers
        self.access_token = access_token
        self.audio_extensions = audio_extensions
        self.progress = progress

    def run(self, source: Path) -> RunReport:
        """Process every album directory under ``source``.

        Raises:
            ConfigurationError: If ``source`` is not a directory
        """
        start = time.monotonic()
        report = RunReport()

        for album_path in resolve_album_directories(source):
            self.process_album(album_path, report)

        report.duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Processed %d albums, %d updated, %d skipped in %dms",
            report.albums_processed,
            len(report.results),
            len(report.skipped),
            report.duration_ms,
        )
        return report

    def process_album(
        self, album_path: Path, report: RunReport
    ) -> Optional[SyncResult]:
        """Run tag reading, artwork resolution and reconciliation for one album."""
        album = AlbumDirectory.scan(album_path, self.audio_extensions)

        try:
            metadata = self._read_metadata(album)
            target_album_path = self._target_album_path(album, metadata)
        except AlbumSkipped as e:
            logger.warning("Skipping %s: %s", e.path, e.reason)
            report.skipped.append(SkippedAlbum(path=e.path, reason=e.reason))
            return None

        report.albums_processed += 1
        if self.progress is not None:
            self.progress(album, metadata)

        state = ArtworkState.from_file_names(album.file_names)
        artwork = self.artwork_resolver.resolve(
            metadata, state, album.path, self.access_token, self.fetch_covers
        )
        report.artwork_errors.extend((album.path, error) for error in artwork.errors)
        if artwork.did_write_anything:
            report.artwork_written.extend(artwork.written_files)
            album = album.refresh()

        if target_album_path is None:
            return None

        result = self.reconciler.reconcile(
            album,
            target_album_path,
            count_files(target_album_path),
            artwork.did_write_anything,
        )
        if result is not None:
            report.results.append(result)
        return result

    def _read_metadata(self, album: AlbumDirectory) -> AlbumMetadata:
        audio_files = album.audio_files
        if not audio_files:
            raise AlbumSkipped(album.path, "no audio files")
        metadata = self.tag_reader.read(audio_files[0])
        logger.debug("%s: %s", album.path, metadata)
        return metadata

    def _target_album_path(
        self, album: AlbumDirectory, metadata: AlbumMetadata
    ) -> Optional[Path]:
        if self.target_directory is None:
            return None
        # "/" in an artist nests one level deeper, but must stay inside the target
        segments = metadata.artist.split("/")
        if any(segment.strip() in ("", ".", "..") for segment in segments):
            raise AlbumSkipped(
                album.path,
                f"artist tag is not a usable directory name: {metadata.artist!r}",
            )
        return self.target_directory.joinpath(*segments, album.name)


def load_credentials(config: Config) -> Optional[Credentials]:
    """Credentials from the configured file, with a direct token taking precedence.

    Raises:
        ConfigurationError: If the credentials file cannot be loaded
    """
    credentials = None
    if config.credentials_file is not None:
        credentials = Credentials.from_file(config.credentials_file)
    if config.access_token:
        credentials = (credentials or Credentials()).model_copy(
            update={"access_token": config.access_token}
        )
    return credentials


def build_pipeline(
    config: Config,
    http_client: HttpClient,
    access_token: Optional[str] = None,
    progress: Optional[ProgressCallback] = None,
) -> PipelineDriver:
    """Wire the default collaborators together."""
    artwork_resolver = ArtworkResolver(
        authenticated_provider=TidalArtworkProvider(
            http_client, country_code=config.tidal_country_code
        ),
        fallback_provider=MusicBrainzCoverProvider(http_client),
        auth_cover_policy=config.auth_cover_policy,
    )
    return PipelineDriver(
        tag_reader=TagReader(),
        artwork_resolver=artwork_resolver,
        reconciler=SyncReconciler(),
        target_directory=config.target_directory,
        fetch_covers=config.fetch_covers,
        access_token=access_token,
        audio_extensions=config.audio_extensions,
        progress=progress,
    )


def run_mirror(
    config: Config,
    progress: Optional[ProgressCallback] = None,
    http_client: Optional[HttpClient] = None,
) -> RunReport:
    """Validate configuration, resolve credentials and run the pipeline.

    Raises:
        ConfigurationError: On invalid configuration or credentials
        CredentialResolutionError: If the token refresh fails
        ArtworkFetchFailure: Under the strict auth cover policy
    """
    config.validate()
    source = config.source_directory
    if source is None:
        raise ConfigurationError("A source directory is required")
    credentials = load_credentials(config)

    with http_client or HttpClient.from_config(config) as client:
        access_token = CredentialResolver(client).resolve(credentials)
        pipeline = build_pipeline(config, client, access_token, progress)
        return pipeline.run(source)
