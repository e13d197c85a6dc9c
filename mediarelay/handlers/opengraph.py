"""Generic fallback handler that reads OpenGraph metadata from a page."""

from __future__ import annotations

import itertools
import logging
import urllib.parse
from typing import Any, Iterator, Mapping

from bs4 import BeautifulSoup

from ..core.errors import HandlerError, RelayError
from ..core.http_client import HttpClient
from .base import BaseHandler, HandlerResult

LOGGER = logging.getLogger(__name__)

_HTML_TYPES = {"text/html", "application/xhtml+xml"}
_IMAGE_PROPERTIES = {"og:image", "og:image:url", "og:image:secure_url"}
DEFAULT_MAX_IMAGES = 10


class OpenGraphHandler(BaseHandler):
    name = "opengraph"

    def __init__(self, client: HttpClient, *, config: Mapping[str, Any] | None = None) -> None:
        super().__init__(client, config=config)
        raw = self.config.get("max_images", DEFAULT_MAX_IMAGES)
        try:
            self.max_images = int(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"handlers.opengraph.max_images must be an integer, got {raw!r}"
            ) from exc
        if self.max_images < 1:
            raise ValueError(f"handlers.opengraph.max_images must be at least 1, got {raw!r}")

    async def handle(self, url: str) -> HandlerResult | None:
        if urllib.parse.urlparse(url).scheme not in ("http", "https"):
            return None

        try:
            response = await self.client.get(url, timeout=self.config.get("timeout"))
            response.raise_for_status()
        except RelayError as exc:
            raise HandlerError(
                f"Could not load {url}: {exc.message}", details=exc.details
            ) from exc

        if response.content_type and response.content_type not in _HTML_TYPES:
            LOGGER.debug(
                "Skipping non-HTML response",
                extra={"url": url, "content_type": response.content_type},
            )
            return None

        soup = BeautifulSoup(response.text, "html.parser")
        images = list(itertools.islice(_og_images(soup, base_url=response.url), self.max_images))
        if not images:
            return None

        return HandlerResult.build(
            images,
            title=_meta(soup, "og:title") or _page_title(soup),
            description=_meta(soup, "og:description") or _named_meta(soup, "description"),
            tags=_tags(soup),
        )


def _meta(soup: BeautifulSoup, prop: str) -> str:
    tag = soup.find("meta", attrs={"property": prop}) or soup.find("meta", attrs={"name": prop})
    content = tag.get("content") if tag else None
    return content.strip() if isinstance(content, str) else ""


def _named_meta(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"name": name})
    content = tag.get("content") if tag else None
    return content.strip() if isinstance(content, str) else ""


def _page_title(soup: BeautifulSoup) -> str:
    return soup.title.string.strip() if soup.title and soup.title.string else ""


def _og_images(soup: BeautifulSoup, *, base_url: str) -> Iterator[str]:
    # og:image:url and og:image:secure_url describe the og:image they follow.
    groups: list[dict[str, str]] = []
    for tag in soup.find_all("meta", attrs={"property": True}):
        prop = tag.get("property")
        content = tag.get("content")
        if prop not in _IMAGE_PROPERTIES or not isinstance(content, str) or not content.strip():
            continue
        if prop == "og:image" or not groups:
            groups.append({})
        groups[-1].setdefault(prop, content.strip())

    seen: set[str] = set()
    for group in groups:
        src = group.get("og:image:secure_url") or group.get("og:image") or group["og:image:url"]
        absolute = urllib.parse.urljoin(base_url, src)
        key = urllib.parse.urlparse(absolute)._replace(scheme="").geturl()
        if key in seen:
            continue
        seen.add(key)
        yield absolute


def _tags(soup: BeautifulSoup) -> list[str]:
    tags = [
        tag.get("content", "").strip()
        for tag in soup.find_all("meta", attrs={"property": "article:tag"})
    ]
    keywords = _named_meta(soup, "keywords")
    if keywords:
        tags.extend(part.strip() for part in keywords.split(","))
    return [tag for tag in tags if tag]
