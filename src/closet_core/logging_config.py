"""Logging configuration module."""

import logging

from closet_core.config import get_settings


def configure_logging() -> None:
    """Configure root logger according to project conventions."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
