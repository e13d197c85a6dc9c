"""Credential and session-cookie management for Guilded."""

from __future__ import annotations

import json
import os
import tempfile
from os import environ
from pathlib import Path
from typing import Any, Mapping

from mediarelay.core.errors import TransportError
from mediarelay.core.http_client import HttpClient
from mediarelay.utils.logging import get_logger

from .api import GuildedApiError

LOGGER = get_logger(__name__)


class GuildedCredentialStore:
    """Resolves the bot account from environment variables and caches its session cookies."""

    def __init__(
        self,
        *,
        session_cache_path: Path,
        env: Mapping[str, str] | None = None,
        env_email_key: str = "GUILDED_EMAIL",
        env_password_key: str = "GUILDED_PASSWORD",
    ) -> None:
        self._env = env if env is not None else environ
        self._session_cache_path = session_cache_path
        self._env_email_key = env_email_key
        self._env_password_key = env_password_key

    def load_email(self) -> str:
        try:
            return self._env[self._env_email_key]
        except KeyError as exc:
            raise RuntimeError(
                f"Missing environment variable {self._env_email_key}; cannot log in to Guilded"
            ) from exc

    def load_password(self) -> str:
        try:
            return self._env[self._env_password_key]
        except KeyError as exc:
            raise RuntimeError(
                f"Missing environment variable {self._env_password_key}; cannot log in to Guilded"
            ) from exc

    def load_cached_cookies(self) -> list[dict[str, Any]] | None:
        """Return cached session cookies, or ``None`` when there is no usable cache."""
        path = self._session_cache_path
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            cookies = [
                {
                    "name": str(item["name"]),
                    "value": str(item["value"]),
                    "domain": item.get("domain") or "",
                    "path": item.get("path") or "/",
                }
                for item in payload["cookies"]
            ]
        except (OSError, json.JSONDecodeError, KeyError, TypeError):
            return None
        return cookies or None

    def store_cookies(self, cookies: list[dict[str, Any]]) -> None:
        """Persist session cookies for reuse across restarts."""
        path = self._session_cache_path
        path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps({"cookies": cookies})
        with tempfile.NamedTemporaryFile("w", delete=False, dir=str(path.parent)) as tmp:
            tmp.write(data)
            tmp_path = Path(tmp.name)
        tmp_path.replace(path)
        if os.name != "nt":  # set stricter permissions on POSIX systems
            os.chmod(path, 0o600)

    async def login(self, http: HttpClient, api_url: str) -> None:
        """Log in with the configured account and cache the resulting cookies."""
        url = f"{api_url}/login"
        payload = {"email": self.load_email(), "password": self.load_password()}
        try:
            response = await http.post_json(url, payload)
        except TransportError as exc:
            raise GuildedApiError("Could not reach Guilded to log in", details=exc.details) from exc
        if not response.ok:
            raise GuildedApiError(
                "Guilded login was rejected",
                details={"status": response.status, "body": response.text[:200]},
            )

        cookies = [
            {"name": c.name, "value": c.value, "domain": c.domain, "path": c.path}
            for c in http.cookies
        ]
        self.store_cookies(cookies)
        LOGGER.info("Logged in to Guilded", extra={"event": "guilded.login"})

    async def ensure_session(
        self, http: HttpClient, api_url: str, *, force_refresh: bool = False
    ) -> None:
        """Load cached cookies into ``http`` or log in when there are none."""
        if not force_refresh:
            cached = self.load_cached_cookies()
            if cached:
                for cookie in cached:
                    http.cookies.set(
                        cookie["name"],
                        cookie["value"],
                        domain=cookie["domain"],
                        path=cookie["path"],
                    )
                LOGGER.debug("Reusing cached Guilded session")
                return
        http.cookies.clear()
        await self.login(http, api_url)
