"""Error types shared by the relay."""

from __future__ import annotations

import json
from typing import Any, Mapping


class RelayError(RuntimeError):
    """Base error for everything the relay raises on purpose.

    ``message`` is the text shown to chat users; an empty message marks the
    error as silent, so it only reaches the logs. ``details`` are appended to
    ``str()`` for diagnostics.
    """

    def __init__(self, message: str = "", *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    @property
    def silent(self) -> bool:
        return not self.message

    def __str__(self) -> str:
        base = self.message
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}" if base else f"details: {detail_repr}"


class NoUrlError(RelayError):
    """Raised when resolution is requested without a URL."""


class NoHandlerMatchedError(RelayError):
    """Raised when every handler in the chain declined the URL."""

    def __init__(self, url: str) -> None:
        super().__init__(details={"url": url})
        self.url = url


class HandlerError(RelayError):
    """A handler recognised the URL but failed while processing it."""


class TransportError(RelayError):
    """HTTP transport failure (connection, status or body decoding)."""


def user_message(exc: BaseException) -> str:
    """Return the text that may be shown to users for ``exc``."""
    if isinstance(exc, RelayError):
        return exc.message
    return str(exc)


__all__ = [
    "RelayError",
    "NoUrlError",
    "NoHandlerMatchedError",
    "HandlerError",
    "TransportError",
    "user_message",
]
