"""Building blocks shared by the artwork providers.

Every provider step returns a ``FetchOutcome`` tagged as found, not found or
error. Steps are chained with ``FetchOutcome.then`` so a provider reads as a flat
sequence of steps; the first step that does not find anything short-circuits the
rest of the chain.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional

from ...exceptions import ArtworkFetchFailure
from ...models import AlbumMetadata, ArtworkState
from ..http import FetchErrorKind, HttpClient

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    """Tag of a provider step outcome."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of a single provider step."""

    status: OutcomeStatus
    value: Any = None
    reason: str = ""
    kind: Optional[FetchErrorKind] = None

    @classmethod
    def found(cls, value: Any) -> "FetchOutcome":
        return cls(OutcomeStatus.FOUND, value=value)

    @classmethod
    def not_found(cls, reason: str) -> "FetchOutcome":
        return cls(OutcomeStatus.NOT_FOUND, reason=reason)

    @classmethod
    def error(cls, kind: FetchErrorKind, reason: str) -> "FetchOutcome":
        return cls(OutcomeStatus.ERROR, reason=reason, kind=kind)

    @property
    def is_found(self) -> bool:
        return self.status == OutcomeStatus.FOUND

    @property
    def is_error(self) -> bool:
        return self.status == OutcomeStatus.ERROR

    def then(self, step: Callable[[Any], "FetchOutcome"]) -> "FetchOutcome":
        """Feed a found value into ``step``; pass any other outcome through."""
        if not self.is_found:
            return self
        return step(self.value)


@dataclass
class ArtworkRequest:
    """Everything a provider needs to know about one album."""

    metadata: AlbumMetadata
    state: ArtworkState
    album_path: Path
    access_token: Optional[str] = None


@dataclass
class ArtworkError:
    """A non-fatal provider failure collected for the run report."""

    provider: str
    kind: FetchErrorKind
    message: str


@dataclass
class ArtworkResult:
    """Files written by the resolver for one album, plus collected errors."""

    written_files: List[Path] = field(default_factory=list)
    errors: List[ArtworkError] = field(default_factory=list)

    @property
    def did_write_anything(self) -> bool:
        return bool(self.written_files)

    @property
    def cover_written(self) -> bool:
        return any(p.name.startswith("cover.") for p in self.written_files)


class ArtworkProvider(ABC):
    """A source of album covers and/or artist pictures."""

    name = "provider"

    def __init__(self, http_client: HttpClient) -> None:
        """Initialize the provider.

        Args:
            http_client: Shared HTTP client
        """
        self.http_client = http_client

    @abstractmethod
    def fetch(self, request: ArtworkRequest) -> List[FetchOutcome]:
        """Fetch whatever artwork this provider can supply for ``request``.

        Returns:
            One outcome per attempted image; found values are written paths
        """

    def get_json(self, url: str, **kwargs: Any) -> FetchOutcome:
        """GET JSON, turning request failures into error outcomes."""
        try:
            return FetchOutcome.found(self.http_client.get_json(url, **kwargs))
        except ArtworkFetchFailure as e:
            return FetchOutcome.error(_error_kind(e), str(e))

    def download(self, url: str, destination: Path) -> FetchOutcome:
        """Download ``url`` into ``destination``."""
        try:
            content = self.http_client.get_bytes(url)
        except ArtworkFetchFailure as e:
            return FetchOutcome.error(_error_kind(e), str(e))

        try:
            destination.write_bytes(content)
        except OSError as e:
            return FetchOutcome.error(
                FetchErrorKind.FILESYSTEM, f"Cannot write {destination}: {e}"
            )

        logger.info("Saved %s", destination)
        return FetchOutcome.found(destination)


def _error_kind(error: ArtworkFetchFailure) -> FetchErrorKind:
    try:
        return FetchErrorKind(error.kind)
    except ValueError:
        return FetchErrorKind.TRANSPORT


def read_field(data: Any, *keys: str) -> FetchOutcome:
    """Walk nested JSON objects along ``keys``.

    A missing key is an error, an explicit ``null`` means not found.
    """
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return FetchOutcome.error(
                FetchErrorKind.MISSING_FIELD,
                f"Response has no '{'.'.join(keys)}' field",
            )
        current = current[key]
        if current is None:
            return FetchOutcome.not_found(f"'{'.'.join(keys)}' is null")
    return FetchOutcome.found(current)


def read_string(data: Any, *keys: str) -> FetchOutcome:
    """Like ``read_field`` but the value must be a string."""
    return read_field(data, *keys).then(
        lambda value: FetchOutcome.found(value)
        if isinstance(value, str)
        else FetchOutcome.error(
            FetchErrorKind.DESERIALIZATION,
            f"'{'.'.join(keys)}' is not a string",
        )
    )


def first_item(data: Any, key: str) -> FetchOutcome:
    """Return the first element of the list under ``key``."""
    return read_field(data, key).then(
        lambda items: FetchOutcome.found(items[0])
        if isinstance(items, list) and items
        else FetchOutcome.not_found(f"'{key}' is empty")
    )
