"""Core primitives: errors, HTTP transport and the handler chain."""

from .errors import (
    HandlerError,
    NoHandlerMatchedError,
    NoUrlError,
    RelayError,
    TransportError,
    user_message,
)
from .http_client import HttpClient, HttpResponse
from .resolver import HandlerChain

__all__ = [
    "HandlerChain",
    "HandlerError",
    "HttpClient",
    "HttpResponse",
    "NoHandlerMatchedError",
    "NoUrlError",
    "RelayError",
    "TransportError",
    "user_message",
]
