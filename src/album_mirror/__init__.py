"""Album Mirror.

Mirrors per-album audio directories into an artist/album organized library,
fetching missing cover and artist artwork from online providers on the way.
"""

__version__ = "1.0.0"
__author__ = "Anton"
__email__ = ""

from .config import Config
from .core.pipeline import PipelineDriver, RunReport, build_pipeline
from .exceptions import (
    AlbumSkipped,
    ArtworkFetchFailure,
    ConfigurationError,
    CredentialResolutionError,
    FilesystemError,
)
from .models import AlbumDirectory, AlbumMetadata, ArtworkState, Credentials, SyncResult

__all__ = [
    "AlbumDirectory",
    "AlbumMetadata",
    "ArtworkState",
    "Credentials",
    "SyncResult",
    "Config",
    "PipelineDriver",
    "RunReport",
    "build_pipeline",
    "AlbumSkipped",
    "ArtworkFetchFailure",
    "ConfigurationError",
    "CredentialResolutionError",
    "FilesystemError",
]
