"""Resolve stored Tidal credentials into a bearer token."""

import logging
from typing import Optional

from ..exceptions import (
    ArtworkFetchFailure,
    ConfigurationError,
    CredentialResolutionError,
)
from ..models import Credentials
from .http import HttpClient

logger = logging.getLogger(__name__)

REFRESH_SCOPE = "r_usr w_usr"


class CredentialResolver:
    """Turns refresh-token credentials into an access token, once per run."""

    def __init__(self, http_client: HttpClient) -> None:
        """Initialize the resolver.

        Args:
            http_client: Shared HTTP client used for the refresh exchange
        """
        self.http_client = http_client
        self._resolved = False
        self._access_token: Optional[str] = None

    def resolve(self, credentials: Optional[Credentials]) -> Optional[str]:
        """Return the access token for ``credentials``.

        The first result is cached and returned by later calls; tokens are never
        refreshed mid-run.

        Args:
            credentials: Stored credentials, or None to disable authenticated
                artwork fetching

        Returns:
            Access token, or None when no credentials were supplied

        Raises:
            ConfigurationError: If the credentials are incomplete
            CredentialResolutionError: If the refresh exchange fails
        """
        if self._resolved:
            return self._access_token

        self._access_token = self._resolve(credentials)
        self._resolved = True
        return self._access_token

    def _resolve(self, credentials: Optional[Credentials]) -> Optional[str]:
        if credentials is None:
            logger.info("No credentials supplied, Tidal artwork lookup disabled")
            return None

        if credentials.access_token:
            return credentials.access_token

        if credentials.refresh_token:
            if not credentials.client_id:
                raise ConfigurationError("clientId is required with refreshToken")
            if not credentials.token_url:
                raise ConfigurationError("tokenUrl is required with refreshToken")
            return self._refresh(
                credentials.token_url, credentials.client_id, credentials.refresh_token
            )

        raise ConfigurationError("Credentials need either accessToken or refreshToken")

    def _refresh(self, token_url: str, client_id: str, refresh_token: str) -> str:
        logger.info("Refreshing access token via %s", token_url)
        try:
            payload = self.http_client.post_form(
                token_url,
                data={
                    "client_id": client_id,
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                    "scope": REFRESH_SCOPE,
                },
            )
        except ArtworkFetchFailure as e:
            logger.error("Token refresh failed: %s", e)
            raise CredentialResolutionError(f"Token refresh failed: {e}") from e

        access_token = (
            payload.get("access_token") if isinstance(payload, dict) else None
        )
        if not isinstance(access_token, str):
            raise CredentialResolutionError(
                "Token endpoint response has no string 'access_token' field"
            )

        logger.info("Access token refreshed")
        return access_token
