"""Platform integration package."""

from __future__ import annotations

from .base import (
    InboundMessage,
    MediaDraft,
    MediaPost,
    MediaPublisher,
    MediaUploader,
    MessageSender,
    ThreadedReply,
    UploadedAsset,
)

__all__ = [
    "InboundMessage",
    "MediaDraft",
    "MediaPost",
    "MediaPublisher",
    "MediaUploader",
    "MessageSender",
    "ThreadedReply",
    "UploadedAsset",
]
