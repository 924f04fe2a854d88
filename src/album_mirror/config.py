"""Configuration management for the album mirror."""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from . import __version__
from .exceptions import ConfigurationError
from .models import AUDIO_EXTENSIONS

# Load .env file from config directory or project root
_config_env = Path(__file__).parent.parent.parent / "config" / ".env"
if _config_env.exists():
    load_dotenv(_config_env)
else:
    load_dotenv()


class AuthCoverPolicy(str, Enum):
    """What to do when a token was supplied but Tidal produced no cover."""

    LOG = "log"  # log the miss and fall back to MusicBrainz
    STRICT = "strict"  # abort the run


class Config:
    """Application configuration."""

    audio_extensions = AUDIO_EXTENSIONS

    def __init__(self, config_override: Optional[Mapping[str, Any]] = None) -> None:
        """Initialize configuration from environment variables.

        Args:
            config_override: Optional values that take precedence over the
                environment (usually from command-line options)
        """
        # HTTP settings
        self.http_timeout = self._parse_timeout(
            os.getenv("ALBUM_MIRROR_HTTP_TIMEOUT", "60")
        )
        self.user_agent = os.getenv(
            "ALBUM_MIRROR_USER_AGENT", f"album-mirror/{__version__}"
        )

        # Artwork provider settings
        self.tidal_country_code = os.getenv("ALBUM_MIRROR_TIDAL_COUNTRY_CODE", "US")
        self.auth_cover_policy = self._parse_policy(
            os.getenv("ALBUM_MIRROR_AUTH_COVER_POLICY", AuthCoverPolicy.LOG.value)
        )

        credentials_file = os.getenv("ALBUM_MIRROR_CREDENTIALS_FILE")
        self.credentials_file: Optional[Path] = (
            Path(credentials_file).expanduser() if credentials_file else None
        )
        self.access_token: Optional[str] = None

        # Run settings
        self.source_directory: Optional[Path] = None
        self.target_directory: Optional[Path] = None
        self.fetch_covers = False

        if config_override:
            self.apply_overrides(config_override)

    def apply_overrides(self, overrides: Mapping[str, Any]) -> None:
        """Apply overrides, skipping ``None`` values.

        Raises:
            ConfigurationError: If an override names an unknown setting
        """
        for key, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self, key):
                raise ConfigurationError(f"Unknown configuration setting: {key}")
            if key == "http_timeout":
                value = self._parse_timeout(value)
            elif key == "auth_cover_policy":
                value = self._parse_policy(value)
            elif key in ("source_directory", "target_directory", "credentials_file"):
                value = Path(value).expanduser()
            setattr(self, key, value)

    def validate(self) -> None:
        """Check the settings a run cannot start without.

        Raises:
            ConfigurationError: If the source directory is missing or invalid
        """
        if self.source_directory is None:
            raise ConfigurationError("A source directory is required")
        if not self.source_directory.is_dir():
            raise ConfigurationError(
                f"Source directory does not exist: {self.source_directory}"
            )
        if self.credentials_file is not None and not self.credentials_file.is_file():
            raise ConfigurationError(
                f"Credentials file does not exist: {self.credentials_file}"
            )

    @staticmethod
    def _parse_timeout(value: Any) -> float:
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"HTTP timeout must be numeric, got: {value}")
        if timeout <= 0:
            raise ConfigurationError(f"HTTP timeout must be positive, got: {value}")
        return timeout

    @staticmethod
    def _parse_policy(value: Any) -> AuthCoverPolicy:
        if isinstance(value, AuthCoverPolicy):
            return value
        try:
            return AuthCoverPolicy(str(value).lower())
        except ValueError:
            choices = ", ".join(policy.value for policy in AuthCoverPolicy)
            raise ConfigurationError(
                f"Invalid auth cover policy '{value}', expected one of: {choices}"
            )


def get_config(config_override: Optional[Mapping[str, Any]] = None) -> Config:
    """Get application configuration."""
    return Config(config_override)
