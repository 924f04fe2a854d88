"""Exceptions raised by the album mirror."""

from pathlib import Path
from typing import Optional


class ConfigurationError(Exception):
    """Invalid or incomplete configuration; aborts before any album is processed."""

    pass


class CredentialResolutionError(Exception):
    """The OAuth refresh exchange failed."""

    pass


class AlbumSkipped(Exception):
    """An album directory could not be processed and is skipped."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialize the exception.

        Args:
            path: Album directory that was skipped
            reason: Human readable reason
        """
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ArtworkFetchFailure(Exception):
    """A provider request failed (transport, status, parsing or missing field)."""

    def __init__(self, message: str, kind: Optional[str] = None) -> None:
        """Initialize the exception.

        Args:
            message: Description of the failure
            kind: Failure category, see ``FetchErrorKind``
        """
        super().__init__(message)
        self.kind = kind


class FilesystemError(Exception):
    """Copying a file into the target library failed."""

    pass
