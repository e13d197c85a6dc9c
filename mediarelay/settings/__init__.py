"""Settings package exports."""

from .loader import (
    AppConfig,
    GuildedSettings,
    HttpSettings,
    PathSettings,
    RelaySettings,
    TITLE_LIMIT,
    load_config,
)

__all__ = [
    "AppConfig",
    "GuildedSettings",
    "HttpSettings",
    "PathSettings",
    "RelaySettings",
    "TITLE_LIMIT",
    "load_config",
]
