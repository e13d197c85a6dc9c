"""Utility exports."""

from .links import extract_channel_mentions, extract_links, first_link
from .logging import configure_logging, get_logger, resolve_level

__all__ = [
    "extract_channel_mentions",
    "extract_links",
    "first_link",
    "configure_logging",
    "get_logger",
    "resolve_level",
]
