"""Handler registry."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Type

from ..core.http_client import HttpClient
from .base import BaseHandler, Handler, HandlerResult
from .direct import DirectMediaHandler
from .opengraph import OpenGraphHandler

LOGGER = logging.getLogger(__name__)

HANDLER_REGISTRY: Dict[str, Type[BaseHandler]] = {
    DirectMediaHandler.name: DirectMediaHandler,
    OpenGraphHandler.name: OpenGraphHandler,
}


def get_handler(name: str) -> Type[BaseHandler]:
    try:
        return HANDLER_REGISTRY[name.lower()]
    except KeyError as exc:
        raise KeyError(f"Unknown handler '{name}'. Registered: {list(HANDLER_REGISTRY)}") from exc


def build_handlers(
    names: Iterable[str],
    client: HttpClient,
    options_for: Callable[[str], Mapping[str, Any]] | None = None,
) -> list[BaseHandler]:
    """Instantiate the configured handlers in chain order."""
    handlers: list[BaseHandler] = []
    for name in names:
        handler_cls = get_handler(name)
        config = options_for(name) if options_for else {}
        handler = handler_cls(client, config=config)
        LOGGER.info("Loaded handler '%s'", handler.name, extra={"handler": handler.name})
        handlers.append(handler)
    return handlers


__all__ = [
    "HANDLER_REGISTRY",
    "BaseHandler",
    "DirectMediaHandler",
    "Handler",
    "HandlerResult",
    "OpenGraphHandler",
    "build_handlers",
    "get_handler",
]
