"""Logging setup for the album-mirror command.

Diagnostics go to stderr so the run report printed on stdout stays readable
when the output is piped. Colors are only used when stderr is a terminal.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

APP_LOGGER = "album_mirror"
LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Libraries that log through the request/tag path of a run
THIRD_PARTY_LOGGERS: Tuple[str, ...] = (
    "mutagen",
    "urllib3",
    "requests",
    "charset_normalizer",
)

CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d %(message)s"


class LevelColorFormatter(logging.Formatter):
    """Console formatter that colors the padded level name."""

    COLORS: Dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_color: bool = True) -> None:
        super().__init__(fmt=fmt, datefmt="%H:%M:%S")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        padded = f"{levelname:<8}"
        if self.use_color:
            color = self.COLORS.get(record.levelno, "")
            padded = f"{color}{padded}{self.RESET}"
        record.levelname = padded
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _level(log_level: str) -> int:
    return getattr(logging, log_level.upper(), logging.INFO)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    max_file_size: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """Route album-mirror logging to stderr and, optionally, a rotating file.

    Calling this again replaces the handlers installed by an earlier call.

    Args:
        log_level: One of ``LOG_LEVELS``
        log_file: Optional path of a log file; its directory is created
        max_file_size: Size in bytes at which the log file rotates
        backup_count: Number of rotated log files to keep
    """
    level = _level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stream = sys.stderr
    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(
        LevelColorFormatter(
            DEBUG_CONSOLE_FORMAT if level <= logging.DEBUG else CONSOLE_FORMAT,
            use_color=stream.isatty(),
        )
    )
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    logging.getLogger(APP_LOGGER).setLevel(level)
    logging.getLogger(__name__).debug("Logging initialized at %s", log_level)


def configure_third_party_loggers(level: int = logging.WARNING) -> None:
    """Keep library loggers at ``level`` even when the tool runs at DEBUG."""
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(level)
