"""Handler contract and result type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from ..core.http_client import HttpClient


@dataclass(frozen=True, slots=True)
class HandlerResult:
    """Media found behind a URL plus the text used to describe it."""

    media: tuple[str, ...]
    title: str = ""
    description: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        media: Iterable[str],
        *,
        title: str | None = None,
        description: str | None = None,
        tags: Iterable[str] = (),
    ) -> "HandlerResult":
        return cls(
            media=tuple(media),
            title=title or "",
            description=description or "",
            tags=frozenset(tag for tag in tags if tag),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "media": list(self.media),
            "title": self.title,
            "description": self.description,
            "tags": sorted(self.tags),
        }


class Handler(Protocol):
    """Inspects a URL and either returns a result, declines, or raises."""

    name: str

    async def handle(self, url: str) -> HandlerResult | None:
        """Return ``None`` when the URL is not this handler's business."""


class BaseHandler(ABC):
    name: str = "base"

    def __init__(self, client: HttpClient, *, config: Mapping[str, Any] | None = None) -> None:
        self.client = client
        self.config = dict(config or {})

    @abstractmethod
    async def handle(self, url: str) -> HandlerResult | None:
        """Resolve ``url``; ``None`` declines, exceptions are faults."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
