"""Centralized logging configuration for applications embedding prioload."""

import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """Configure app-wide logging. Call once at startup."""
    format_str = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=level,
        format=format_str,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
