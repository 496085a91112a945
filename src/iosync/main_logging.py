"""Logging configuration for iosync CLI."""
from __future__ import annotations

import logging


def configure_logging(verbose: bool, log_file: str | None = None) -> None:
    """Configure logging level and handlers.

    Args:
        verbose: If True, set DEBUG level; otherwise WARNING level.
        log_file: Optional path; records are also appended there.

    Errors are always printed to stderr regardless of verbosity. Every
    record starts with its level name, so a log line on stderr can never
    be mistaken for a sync frame.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=handlers,
    )
