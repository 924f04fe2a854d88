"""Shared HTTP client used for credential refresh and artwork fetching.

One ``requests.Session`` is created per run and handed to every component that
talks to the network. Failures are normalized into ``ArtworkFetchFailure`` with a
``kind`` so callers can turn them into tagged outcomes.
"""

import logging
from enum import Enum
from types import TracebackType
from typing import Any, Dict, Mapping, Optional, Type

import requests

from ..config import Config
from ..exceptions import ArtworkFetchFailure

logger = logging.getLogger(__name__)


class FetchErrorKind(str, Enum):
    """Categories of non-fatal provider failures."""

    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    DESERIALIZATION = "deserialization"
    MISSING_FIELD = "missing_field"
    FILESYSTEM = "filesystem"
    NO_COVER = "no_cover"


class HttpClient:
    """Thin wrapper around a long-lived ``requests.Session``."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 60.0,
        user_agent: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: Session to reuse; a new one is created when omitted
            timeout: Per-request timeout in seconds
            user_agent: Value for the ``User-Agent`` default header
        """
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.session.headers.update({"Accept": "application/json"})
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, config: Config) -> "HttpClient":
        """Build a client from application configuration."""
        return cls(timeout=config.http_timeout, user_agent=config.user_agent)

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def get_json(
        self,
        url: str,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body.

        Raises:
            ArtworkFetchFailure: On transport, status or decoding failure
        """
        response = self._request("GET", url, params=params, headers=headers)
        return self._decode_json(response, url)

    def get_bytes(
        self, url: str, headers: Optional[Mapping[str, str]] = None
    ) -> bytes:
        """GET ``url`` and return the raw body.

        Raises:
            ArtworkFetchFailure: On transport or status failure
        """
        response = self._request("GET", url, headers=headers)
        return response.content

    def post_form(self, url: str, data: Dict[str, str]) -> Any:
        """POST a form-encoded body and decode the JSON response.

        Raises:
            ArtworkFetchFailure: On transport, status or decoding failure
        """
        response = self._request("POST", url, data=data)
        return self._decode_json(response, url)

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.info("Fetching from %s", url)
        try:
            response = self.session.request(
                method, url, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise ArtworkFetchFailure(
                f"{method} {url} failed: {e}", kind=FetchErrorKind.HTTP_STATUS.value
            ) from e
        except requests.exceptions.RequestException as e:
            raise ArtworkFetchFailure(
                f"{method} {url} failed: {e}", kind=FetchErrorKind.TRANSPORT.value
            ) from e
        return response

    @staticmethod
    def _decode_json(response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ArtworkFetchFailure(
                f"Invalid JSON from {url}: {e}",
                kind=FetchErrorKind.DESERIALIZATION.value,
            ) from e
