"""Command-line interface for the album mirror."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..config import AuthCoverPolicy, Config
from ..core.pipeline import run_mirror
from ..exceptions import (
    ArtworkFetchFailure,
    ConfigurationError,
    CredentialResolutionError,
)
from ..utils.logging_config import (
    LOG_LEVELS,
    configure_third_party_loggers,
    setup_logging,
)
from .display import display_album_progress, display_run_report

console = Console()
logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--source",
    "-s",
    required=True,
    type=click.Path(path_type=Path),
    help="Source directory with one directory per album (or per artist)",
)
@click.option(
    "--target",
    "-t",
    type=click.Path(path_type=Path),
    help="Target library root; without it artwork is fetched but nothing is copied",
)
@click.option("--covers", "-c", is_flag=True, help="Fetch missing cover/artist art")
@click.option(
    "--creds",
    type=click.Path(path_type=Path),
    help="JSON file with tokenUrl, clientId, refreshToken and/or accessToken",
)
@click.option("--tidal-auth", help="Tidal access token, overrides --creds")
@click.option(
    "--strict-auth-covers",
    is_flag=True,
    help="Abort when a Tidal token was given but Tidal had no cover",
)
@click.option("--timeout", type=float, help="Per-request HTTP timeout in seconds")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(LOG_LEVELS),
    help="Set logging level",
)
@click.option("--log-file", type=click.Path(), help="Log to file")
@click.version_option(__version__)
def cli(
    source: Path,
    target: Optional[Path],
    covers: bool,
    creds: Optional[Path],
    tidal_auth: Optional[str],
    strict_auth_covers: bool,
    timeout: Optional[float],
    log_level: str,
    log_file: Optional[str],
) -> None:
    """Album Mirror.

    Mirrors album directories from SOURCE into TARGET/<artist>/<album>,
    copying only new albums and new files, and optionally fetches missing
    cover and artist artwork.
    """
    setup_logging(log_level=log_level, log_file=Path(log_file) if log_file else None)
    configure_third_party_loggers()

    try:
        config = Config(
            {
                "source_directory": source,
                "target_directory": target,
                "fetch_covers": covers,
                "credentials_file": creds,
                "access_token": tidal_auth,
                "http_timeout": timeout,
                "auth_cover_policy": (
                    AuthCoverPolicy.STRICT if strict_auth_covers else None
                ),
            }
        )
        report = run_mirror(config, progress=display_album_progress)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        message = escape(str(e))
        console.print(f"[bold red]❌ Configuration error: {message}[/bold red]")
        raise click.Abort()
    except (CredentialResolutionError, ArtworkFetchFailure) as e:
        logger.error("Run aborted: %s", e)
        console.print(f"[bold red]❌ Run aborted: {escape(str(e))}[/bold red]")
        raise click.Abort()
    except Exception as e:
        logger.exception("Mirror failed")
        console.print(f"[bold red]❌ Mirror failed: {escape(str(e))}[/bold red]")
        raise click.Abort()

    display_run_report(report)


if __name__ == "__main__":
    cli()
