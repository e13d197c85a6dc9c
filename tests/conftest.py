"""Shared fixtures: a scripted stand-in for ``requests.Session``."""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest
import requests
from requests.cookies import RequestsCookieJar

from mediarelay.core.http_client import HttpClient
from mediarelay.settings import HttpSettings


def make_response(
    status: int = 200,
    *,
    body: bytes | str | None = None,
    json_body: Any = None,
    headers: dict[str, str] | None = None,
    url: str = "https://example.com/",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    if json_body is not None:
        body = json.dumps(json_body)
        headers = {"Content-Type": "application/json", **(headers or {})}
    if isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body or b""
    response.headers.update(headers or {})
    response.url = url
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: list[requests.Response | Exception]) -> None:
        self.headers: dict[str, str] = {}
        self.cookies = RequestsCookieJar()
        self.calls: list[dict[str, Any]] = []
        self.closed = False
        self._responses = list(responses)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def response() -> Callable[..., requests.Response]:
    return make_response


@pytest.fixture
def http_factory() -> Callable[..., tuple[HttpClient, FakeSession]]:
    def build(*responses: requests.Response | Exception) -> tuple[HttpClient, FakeSession]:
        session = FakeSession(list(responses))
        client = HttpClient(http_settings=HttpSettings(timeout=5), session=session)  # type: ignore[arg-type]
        return client, session

    return build
