"""Pull links and channel mentions out of rich-text message documents.

Messages arrive as a document tree::

    {"object": "document", "nodes": [
        {"object": "block", "type": "paragraph", "nodes": [
            {"object": "text", "leaves": [...]},
            {"object": "inline", "type": "link", "data": {"href": "https://..."}},
            {"object": "inline", "type": "channel", "data": {"channel": {"id": "..."}}},
        ]},
    ]}

Only inline nodes that sit directly inside top-level paragraphs are
considered, in document order.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping


def _paragraph_inlines(document: Mapping[str, Any] | None, kind: str) -> Iterator[Mapping[str, Any]]:
    if not isinstance(document, Mapping):
        return
    for block in document.get("nodes") or ():
        if not isinstance(block, Mapping) or block.get("type") != "paragraph":
            continue
        for leaf in block.get("nodes") or ():
            if isinstance(leaf, Mapping) and leaf.get("type") == kind:
                yield leaf


def _data(node: Mapping[str, Any]) -> Mapping[str, Any]:
    data = node.get("data")
    return data if isinstance(data, Mapping) else {}


def extract_links(document: Mapping[str, Any] | None) -> list[str]:
    """Return every hyperlink target in paragraph order."""
    links: list[str] = []
    for node in _paragraph_inlines(document, "link"):
        href = _data(node).get("href")
        if isinstance(href, str) and href:
            links.append(href)
    return links


def extract_channel_mentions(document: Mapping[str, Any] | None) -> list[str]:
    """Return the ids of mentioned channels in paragraph order."""
    channels: list[str] = []
    for node in _paragraph_inlines(document, "channel"):
        channel = _data(node).get("channel")
        channel_id = channel.get("id") if isinstance(channel, Mapping) else None
        if channel_id:
            channels.append(str(channel_id))
    return channels


def first_link(document: Mapping[str, Any] | None) -> str | None:
    links = extract_links(document)
    return links[0] if links else None
