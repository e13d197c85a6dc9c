"""Helpers for loading relay configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:  # pragma: no cover - Python 3.11+ includes tomllib
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older versions
    import tomli as tomllib  # type: ignore[no-redef]

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "MEDIARELAY_CONFIG"

DEFAULT_API_URL = "https://www.guilded.gg/api"
DEFAULT_MEDIA_URL = "https://media.guilded.gg"
DEFAULT_HANDLERS = ("direct", "opengraph")
DEFAULT_FAILURE_PREFIX = "❌"
DEFAULT_USER_AGENT = "mediarelay/0.1"
TITLE_LIMIT = 80


@dataclass(slots=True)
class GuildedSettings:
    api_url: str = DEFAULT_API_URL
    media_url: str = DEFAULT_MEDIA_URL
    email_env: str = "GUILDED_EMAIL"
    password_env: str = "GUILDED_PASSWORD"


@dataclass(slots=True)
class HttpSettings:
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(slots=True)
class PathSettings:
    state_dir: Path

    @property
    def session_cache(self) -> Path:
        return self.state_dir / "guilded_session.json"


@dataclass(slots=True)
class RelaySettings:
    """Behaviour of the message relay itself."""

    handlers: tuple[str, ...] = DEFAULT_HANDLERS
    default_channel: str | None = None
    failure_prefix: str = DEFAULT_FAILURE_PREFIX
    concurrent_uploads: bool = False
    title_limit: int = TITLE_LIMIT


@dataclass(slots=True)
class AppConfig:
    guilded: GuildedSettings
    http: HttpSettings
    paths: PathSettings
    relay: RelaySettings
    handler_options: dict[str, dict[str, Any]] = field(default_factory=dict)
    source: Path | None = None

    def options_for(self, handler: str) -> dict[str, Any]:
        """Return the configuration block for ``handler`` (empty when absent)."""
        return dict(self.handler_options.get(handler, {}))


def _to_path(value: str | None, *, fallback: Path) -> Path:
    if not value:
        return fallback
    candidate = Path(value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _config_path(explicit: str | os.PathLike[str] | None = None) -> Path:
    candidate: Path
    if explicit:
        candidate = Path(explicit)
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        candidate = Path(env_value) if env_value else PROJECT_ROOT / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _handler_names(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_HANDLERS
    if isinstance(raw, str):
        raw = raw.split(",")
    names = tuple(str(name).strip().lower() for name in raw if str(name).strip())
    if not names:
        raise ValueError("relay.handlers must name at least one handler")
    return names


def _build_relay(section: dict[str, Any]) -> RelaySettings:
    default_channel = section.get("default_channel") or None
    title_limit = int(section.get("title_limit", TITLE_LIMIT))
    if title_limit <= 0:
        raise ValueError(f"relay.title_limit must be positive, got {title_limit}")
    return RelaySettings(
        handlers=_handler_names(section.get("handlers")),
        default_channel=str(default_channel) if default_channel else None,
        failure_prefix=str(section.get("failure_prefix", DEFAULT_FAILURE_PREFIX)),
        concurrent_uploads=bool(section.get("concurrent_uploads", False)),
        title_limit=title_limit,
    )


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path = _config_path(config_path)
    data = _load_toml(path)

    guilded_section = data.get("guilded", {})
    http_section = data.get("http", {})
    paths_section = data.get("paths", {})
    relay_section = data.get("relay", {})
    handlers_section = data.get("handlers", {})

    state_dir = _to_path(paths_section.get("state_dir"), fallback=PROJECT_ROOT / "data" / "state")
    state_dir.mkdir(parents=True, exist_ok=True)

    guilded = GuildedSettings(
        api_url=str(guilded_section.get("api_url", DEFAULT_API_URL)).rstrip("/"),
        media_url=str(guilded_section.get("media_url", DEFAULT_MEDIA_URL)).rstrip("/"),
        email_env=str(guilded_section.get("email_env", "GUILDED_EMAIL")),
        password_env=str(guilded_section.get("password_env", "GUILDED_PASSWORD")),
    )
    http_settings = HttpSettings(
        timeout=float(http_section.get("timeout", 30)),
        user_agent=str(http_section.get("user_agent", DEFAULT_USER_AGENT)),
    )

    handler_options: dict[str, dict[str, Any]] = {}
    for name, block in handlers_section.items():
        if not isinstance(block, dict):
            raise ValueError(f"[handlers.{name}] must be a table")
        handler_options[name.lower()] = dict(block)

    return AppConfig(
        guilded=guilded,
        http=http_settings,
        paths=PathSettings(state_dir=state_dir),
        relay=_build_relay(relay_section),
        handler_options=handler_options,
        source=path,
    )
