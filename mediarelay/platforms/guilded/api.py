"""Guilded REST helpers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Mapping

from mediarelay.core.errors import RelayError, TransportError
from mediarelay.core.http_client import HttpClient
from mediarelay.settings import GuildedSettings

if TYPE_CHECKING:
    from .credentials import GuildedCredentialStore

_SESSION_EXPIRED_STATUSES = {401, 403}


class GuildedApiError(RelayError):
    """Raised when Guilded rejects a call or answers with something unusable."""


class GuildedApiClient:
    """Posts JSON to the REST and media hosts over one shared session."""

    def __init__(
        self,
        http: HttpClient,
        settings: GuildedSettings,
        *,
        credentials: GuildedCredentialStore | None = None,
    ) -> None:
        self._http = http
        self._settings = settings
        self._credentials = credentials
        # Bumped after every forced re-login; requests remember the value they were sent with.
        self._session_generation = 0
        self._refresh_lock = asyncio.Lock()

    @property
    def http(self) -> HttpClient:
        return self._http

    def api_url(self, path: str) -> str:
        return f"{self._settings.api_url}/{path.lstrip('/')}"

    def media_url(self, path: str) -> str:
        return f"{self._settings.media_url}/{path.lstrip('/')}"

    async def connect(self) -> None:
        """Make sure the shared session is authenticated."""
        if self._credentials is not None:
            await self._credentials.ensure_session(self._http, self._settings.api_url)

    async def post(self, path: str, payload: Mapping[str, Any], *, failure: str) -> dict[str, Any]:
        return await self._post_json(self.api_url(path), payload, failure=failure, allow_retry=True)

    async def post_media(
        self, path: str, payload: Mapping[str, Any], *, failure: str
    ) -> dict[str, Any]:
        return await self._post_json(
            self.media_url(path), payload, failure=failure, allow_retry=True
        )

    async def _post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        failure: str,
        allow_retry: bool,
    ) -> dict[str, Any]:
        generation = self._session_generation
        try:
            response = await self._http.post_json(url, payload)
        except TransportError as exc:
            raise GuildedApiError(failure, details=exc.details) from exc

        if (
            response.status in _SESSION_EXPIRED_STATUSES
            and allow_retry
            and self._credentials is not None
        ):
            await self._refresh_session(self._credentials, generation)
            return await self._post_json(url, payload, failure=failure, allow_retry=False)

        if not response.ok:
            raise GuildedApiError(
                failure,
                details={"url": url, "status": response.status, "body": response.text[:200]},
            )

        try:
            data = response.json()
        except TransportError as exc:
            raise GuildedApiError(failure, details=exc.details) from exc

        if not isinstance(data, dict):
            raise GuildedApiError(failure, details={"url": url, "response": data})
        return data

    async def _refresh_session(
        self, credentials: GuildedCredentialStore, seen_generation: int
    ) -> None:
        """Log in again unless another request already did since ``seen_generation``."""
        async with self._refresh_lock:
            if self._session_generation != seen_generation:
                return
            await credentials.ensure_session(
                self._http, self._settings.api_url, force_refresh=True
            )
            self._session_generation += 1
