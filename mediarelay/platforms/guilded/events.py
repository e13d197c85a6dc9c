"""Parsing of gateway events into inbound messages."""

from __future__ import annotations

import json
from typing import Any, Mapping

from mediarelay.platforms.base import InboundMessage

MESSAGE_CREATED = "ChatMessageCreated"


def parse_message_event(payload: Mapping[str, Any]) -> InboundMessage | None:
    """Return the message carried by a ``ChatMessageCreated`` event.

    Accepts either the whole gateway frame (``{"t": ..., "d": {...}}``) or
    only its ``d`` body. Other event types, and frames without a channel or a
    document, yield ``None``.
    """
    if "t" in payload:
        if payload.get("t") != MESSAGE_CREATED:
            return None
        payload = payload.get("d") or {}

    message = payload.get("message")
    if not isinstance(message, Mapping):
        return None

    channel_id = payload.get("channelId") or message.get("channelId")
    content = message.get("content")
    document = content.get("document") if isinstance(content, Mapping) else None
    if not channel_id or not isinstance(document, Mapping):
        return None

    return InboundMessage(
        channel_id=str(channel_id),
        document=document,
        message_id=message.get("id"),
        author_id=message.get("createdBy"),
    )


def parse_event_line(line: str) -> InboundMessage | None:
    """Parse one JSON-lines record; raises ``ValueError`` for invalid JSON."""
    line = line.strip()
    if not line:
        return None
    payload = json.loads(line)
    if not isinstance(payload, Mapping):
        raise ValueError("Gateway event must be a JSON object")
    return parse_message_event(payload)
