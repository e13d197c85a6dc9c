"""Async facade over a shared ``requests`` session."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
import urllib.parse
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from ..settings import HttpSettings
from .errors import TransportError

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpResponse:
    url: str
    status: int
    headers: Mapping[str, str]
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "").split(";", 1)[0].strip().lower()

    def raise_for_status(self) -> None:
        if not self.ok:
            raise TransportError(
                f"{_host(self.url)} answered with HTTP {self.status}",
                details={"url": self.url, "status": self.status, "body": self.text[:200]},
            )

    def json(self) -> Any:
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"{_host(self.url)} sent an unreadable response",
                details={"url": self.url, "body": self.text[:200]},
            ) from exc


class HttpClient:
    """Runs blocking ``requests`` calls in the event loop's default executor.

    One instance owns one ``requests.Session``; every component that is handed
    the same instance shares its cookies, which is how the authenticated
    platform session is reused across hosts.
    """

    def __init__(
        self,
        *,
        http_settings: HttpSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = http_settings
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({"User-Agent": http_settings.user_agent})

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def cookies(self) -> Any:
        return self._session.cookies

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        return await self.request("GET", url, headers=headers, timeout=timeout)

    async def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        return await self.request("POST", url, json_body=payload, headers=headers, timeout=timeout)

    async def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        loop = asyncio.get_running_loop()
        call = functools.partial(
            self._send,
            method.upper(),
            url,
            json_body=json_body,
            headers=headers,
            timeout=timeout if timeout is not None else self._settings.timeout,
        )
        return await loop.run_in_executor(None, call)

    def close(self) -> None:
        self._session.close()

    def _send(
        self,
        method: str,
        url: str,
        *,
        json_body: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
        timeout: float,
    ) -> HttpResponse:
        _LOGGER.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                json=json_body,
                headers=dict(headers) if headers else None,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(
                f"Request to {_host(url)} failed",
                details={"url": url, "reason": str(exc)},
            ) from exc

        return HttpResponse(
            url=response.url or url,
            status=response.status_code,
            headers={key.lower(): value for key, value in response.headers.items()},
            text=response.text,
        )


def _host(url: str) -> str:
    return urllib.parse.urlparse(url).netloc or url
