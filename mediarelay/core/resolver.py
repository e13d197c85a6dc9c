"""Ordered, first-match handler chain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..utils.logging import get_logger
from .errors import NoHandlerMatchedError, NoUrlError

if TYPE_CHECKING:
    from ..handlers.base import Handler, HandlerResult

LOGGER = get_logger(__name__)


class HandlerChain:
    """Tries each handler in configured order until one produces a result.

    A handler returning ``None`` declines and the next one is tried. A handler
    that raises has recognised the URL and failed, so the exception propagates
    and no later handler runs.
    """

    def __init__(self, handlers: Sequence[Handler]) -> None:
        self._handlers = tuple(handlers)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    @property
    def names(self) -> list[str]:
        return [handler.name for handler in self._handlers]

    async def resolve(self, url: str | None) -> HandlerResult:
        if not url:
            raise NoUrlError()

        LOGGER.info("Intercepted URL %s", url, extra={"event": "resolve.start", "url": url})

        for handler in self._handlers:
            LOGGER.debug("Trying handler '%s'", handler.name, extra={"handler": handler.name})
            result = await handler.handle(url)
            if result is not None:
                LOGGER.info(
                    "Handler '%s' matched with %d media item(s)",
                    handler.name,
                    len(result.media),
                    extra={"event": "resolve.matched", "handler": handler.name, "url": url},
                )
                return result

        LOGGER.info("No handler matched %s", url, extra={"event": "resolve.no_match", "url": url})
        raise NoHandlerMatchedError(url)
