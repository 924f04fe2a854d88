"""Data models for the album mirror."""

import json
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigurationError

AUDIO_EXTENSIONS: Tuple[str, ...] = (".flac", ".m4a", ".mp3")
COVER_PREFIX = "cover."
ARTIST_PICTURE_PREFIX = "artist."


class AlbumDirectory(BaseModel):
    """A directory holding the tracks (and optional artwork) of one release."""

    path: Path
    files: List[Path] = []
    audio_extensions: Tuple[str, ...] = AUDIO_EXTENSIONS

    @classmethod
    def scan(
        cls, path: Path, audio_extensions: Tuple[str, ...] = AUDIO_EXTENSIONS
    ) -> "AlbumDirectory":
        """List the regular files of ``path`` in directory-listing order."""
        files = [entry for entry in path.iterdir() if entry.is_file()]
        return cls(path=path, files=files, audio_extensions=audio_extensions)

    def refresh(self) -> "AlbumDirectory":
        """Re-scan the directory, e.g. after artwork was written into it."""
        return self.scan(self.path, self.audio_extensions)

    @property
    def name(self) -> str:
        """Leaf name of the directory, used as the album folder in the target."""
        return self.path.name

    @property
    def audio_files(self) -> List[Path]:
        """Files with a supported audio extension."""
        return [f for f in self.files if f.suffix.lower() in self.audio_extensions]

    @property
    def file_count(self) -> int:
        """Number of regular files in the directory."""
        return len(self.files)

    @property
    def file_names(self) -> List[str]:
        """Names of the regular files in listing order."""
        return [f.name for f in self.files]

    @field_validator("path", mode="before")
    @classmethod
    def validate_path(cls, v: Union[str, Path]) -> Path:
        """Convert input to Path object."""
        return Path(v)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class AlbumMetadata(BaseModel):
    """Tags read from the first audio file of an album."""

    title: str = ""
    album: str = "(none)"
    artist: str
    description: Optional[str] = None
    comment: Optional[str] = None

    @property
    def provider_hints(self) -> List[str]:
        """Non-empty description and comment, in that order."""
        return [hint for hint in (self.description, self.comment) if hint]


class ArtworkState(BaseModel):
    """Which artwork files already exist in an album directory."""

    has_album_cover: bool = False
    has_artist_picture: bool = False

    @classmethod
    def from_file_names(cls, names: List[str]) -> "ArtworkState":
        """Derive the state from ``cover.*`` / ``artist.*`` file names."""
        return cls(
            has_album_cover=any(n.startswith(COVER_PREFIX) for n in names),
            has_artist_picture=any(n.startswith(ARTIST_PICTURE_PREFIX) for n in names),
        )

    @property
    def needs_artwork(self) -> bool:
        """Whether anything is missing."""
        return not (self.has_album_cover and self.has_artist_picture)


class Credentials(BaseModel):
    """Stored Tidal credentials as found in the ``--creds`` JSON document."""

    token_url: Optional[str] = Field(default=None, alias="tokenUrl")
    client_id: Optional[str] = Field(default=None, alias="clientId")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    access_token: Optional[str] = Field(default=None, alias="accessToken")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def from_file(cls, path: Path) -> "Credentials":
        """Load credentials from a JSON file.

        Raises:
            ConfigurationError: If the file cannot be read or is not valid
        """
        try:
            with open(path, "r", encoding="utf-8") as file:
                data = json.load(file)
            return cls.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigurationError(f"Cannot load credentials from {path}: {e}")


class SyncKind(str, Enum):
    """How an album reached the target library."""

    CREATED = "created"  # whole directory copied
    UPDATED = "updated"  # missing files copied into an existing directory


class SyncResult(BaseModel):
    """Outcome of mirroring one album that needed work."""

    target_path: Path
    kind: SyncKind
    copied_files: List[str] = []
    failed_files: List[str] = []

    @property
    def has_failures(self) -> bool:
        """Whether any file failed to copy."""
        return bool(self.failed_files)

    model_config = ConfigDict(arbitrary_types_allowed=True)
