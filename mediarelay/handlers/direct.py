"""Handler for links that already point at a media file."""

from __future__ import annotations

import posixpath
import re
import urllib.parse
from typing import Any, Iterable, Mapping

from ..core.http_client import HttpClient
from .base import BaseHandler, HandlerResult

DEFAULT_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".mp4", ".webm")


def _normalise_extensions(raw: str | Iterable[str]) -> tuple[str, ...]:
    """Accept a list or a comma/space separated string; return dotted lowercase suffixes."""
    items = re.split(r"[,\s]+", raw) if isinstance(raw, str) else raw
    extensions = tuple(
        f".{str(item).strip().lstrip('.').lower()}" for item in items if str(item).strip(" .")
    )
    if not extensions:
        raise ValueError("handlers.direct.extensions must name at least one extension")
    return extensions


class DirectMediaHandler(BaseHandler):
    name = "direct"

    def __init__(self, client: HttpClient, *, config: Mapping[str, Any] | None = None) -> None:
        super().__init__(client, config=config)
        self.extensions = _normalise_extensions(self.config.get("extensions", DEFAULT_EXTENSIONS))

    async def handle(self, url: str) -> HandlerResult | None:
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in ("http", "https"):
            return None
        filename = posixpath.basename(urllib.parse.unquote(parsed.path))
        if not filename.lower().endswith(self.extensions):
            return None
        return HandlerResult.build([url], title=filename)
