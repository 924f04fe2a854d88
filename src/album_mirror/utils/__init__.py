"""Utility helpers for the album mirror."""

from .logging_config import LOG_LEVELS, configure_third_party_loggers, setup_logging

__all__ = ["LOG_LEVELS", "configure_third_party_loggers", "setup_logging"]
