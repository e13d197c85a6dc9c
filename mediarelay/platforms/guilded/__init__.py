"""Guilded platform adapters."""

from __future__ import annotations

from .api import GuildedApiClient, GuildedApiError
from .content import GuildedContentClient
from .credentials import GuildedCredentialStore
from .events import parse_event_line, parse_message_event
from .media import GuildedMediaUploader

__all__ = [
    "GuildedApiClient",
    "GuildedApiError",
    "GuildedContentClient",
    "GuildedCredentialStore",
    "GuildedMediaUploader",
    "parse_event_line",
    "parse_message_event",
]
