"""CLI display and formatting utilities."""

from .formatters import display_album_progress, display_run_report

__all__ = [
    "display_album_progress",
    "display_run_report",
]
