"""Display formatters and UI helpers for CLI.

Paths, tags and file names come from the user's library and may contain
square brackets, so they are always passed through ``escape`` before being
embedded in rich markup.
"""

import logging

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...core.pipeline import RunReport
from ...models import AlbumDirectory, AlbumMetadata

console = Console()
logger = logging.getLogger(__name__)

MAX_ARTWORK_ERRORS = 10


def display_album_progress(album: AlbumDirectory, metadata: AlbumMetadata) -> None:
    """Print the header shown for every album as it is processed.

    Args:
        album: Album directory being processed
        metadata: Tags read from its first audio file
    """
    console.print(f"[bold blue]====== {escape(str(album.path))} ======[/bold blue]")
    console.print(f"  title: {escape(metadata.title)}")
    console.print(f"  album title: {escape(metadata.album)}")
    console.print(f"  album directory name: {escape(album.name)}")
    console.print(f"  artist: {escape(metadata.artist)}")


def display_run_report(report: RunReport) -> None:
    """Display the end-of-run summary.

    Args:
        report: Report returned by the pipeline
    """
    console.print("=" * 50)

    if report.is_up_to_date:
        console.print("[bold green]All up-to-date[/bold green]")
    else:
        console.print("[bold green]Updated following albums:[/bold green]")
        for result in report.results:
            console.print(
                f"{escape(str(result.target_path))} [dim]({result.kind.value})[/dim]"
            )
            for name in result.copied_files:
                console.print(f"\t{escape(name)}")

    if report.failed_copies:
        console.print(
            f"\n[red]❌ {len(report.failed_copies)} file(s) failed to copy:[/red]"
        )
        for target_path, name in report.failed_copies:
            console.print(f"  • {escape(str(target_path / name))}")

    if report.artwork_errors:
        total = len(report.artwork_errors)
        console.print(f"\n[yellow]⚠️  {total} artwork error(s):[/yellow]")
        for album_path, error in report.artwork_errors[:MAX_ARTWORK_ERRORS]:
            console.print(
                f"  • {escape(str(album_path))}: "
                f"{escape(f'[{error.provider}]')} {escape(error.message)}"
            )
        if total > MAX_ARTWORK_ERRORS:
            console.print(f"  ... and {total - MAX_ARTWORK_ERRORS} more")

    if report.skipped:
        console.print(f"\n[dim]Skipped {len(report.skipped)} album(s):[/dim]")
        for skipped in report.skipped:
            console.print(
                f"  [dim]• {escape(str(skipped.path))}: "
                f"{escape(skipped.reason)}[/dim]"
            )

    summary_table = Table(show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green", justify="right")
    summary_table.add_row("Albums Processed", str(report.albums_processed))
    summary_table.add_row("Albums Updated", str(len(report.results)))
    summary_table.add_row("Artwork Files Written", str(len(report.artwork_written)))
    summary_table.add_row("Albums Skipped", str(len(report.skipped)))
    console.print()
    console.print(summary_table)

    console.print(f"Took {report.duration_ms}ms")
