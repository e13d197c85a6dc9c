"""Builders for Guilded's rich-text document format."""

from __future__ import annotations

from typing import Any, Iterable


def text_node(text: str) -> dict[str, Any]:
    return {
        "object": "text",
        "leaves": [{"object": "leaf", "text": text, "marks": []}],
    }


def paragraph(text: str) -> dict[str, Any]:
    return {"object": "block", "type": "paragraph", "data": {}, "nodes": [text_node(text)]}


def captioned_image_node(url: str, caption: str = "") -> dict[str, Any]:
    """An image block with a (possibly empty) caption line underneath."""
    return {
        "object": "block",
        "type": "image",
        "data": {"src": url},
        "nodes": [
            {
                "object": "block",
                "type": "image-caption-line",
                "data": {},
                "nodes": [text_node(caption)],
            }
        ],
    }


def document(nodes: Iterable[dict[str, Any]]) -> dict[str, Any]:
    return {"object": "document", "data": {}, "nodes": list(nodes)}


def message_value(nodes: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Wrap block nodes in the envelope message and reply endpoints expect."""
    return {"object": "value", "document": document(nodes)}


def text_message(text: str) -> dict[str, Any]:
    return message_value([paragraph(text)])
