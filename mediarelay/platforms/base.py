"""Base contracts for the chat platform the relay publishes to."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence


@dataclass(frozen=True, slots=True)
class UploadedAsset:
    """A media file stored by the platform; only ``url`` is interpreted."""

    url: str
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(slots=True)
class MediaDraft:
    """Body of a media post before the platform assigns it an id."""

    title: str
    description: str
    tags: list[str]
    src: str
    type: str = "image"


@dataclass(slots=True)
class MediaPost:
    """A published media post."""

    id: Any
    channel_id: str
    title: str
    description: str
    tags: list[str]
    src: str
    type: str = "image"
    team_id: str | None = None


@dataclass(slots=True)
class ThreadedReply:
    """Reply attached to a media post, one captioned image per extra asset."""

    id: int
    post_id: Any
    nodes: list[dict[str, Any]]


@dataclass(slots=True)
class InboundMessage:
    """A chat message as delivered by the gateway."""

    channel_id: str
    document: Mapping[str, Any]
    message_id: str | None = None
    author_id: str | None = None


class MediaUploader(Protocol):
    """Copies a remote media file into the platform's media store."""

    async def upload(self, source_url: str) -> UploadedAsset:
        """Upload once; failures raise and carry the cause."""


class MediaPublisher(Protocol):
    """Creates media posts and their threaded replies."""

    async def create_media(self, channel_id: str, draft: MediaDraft) -> MediaPost:
        """Submit ``draft`` to the channel's media endpoint."""

    async def create_media_reply(
        self, post: MediaPost, assets: Sequence[UploadedAsset]
    ) -> ThreadedReply:
        """Reply to ``post`` with one captioned image per asset."""


class MessageSender(Protocol):
    """Sends plain text back into a chat channel."""

    async def send_message(self, channel_id: str, text: str) -> Mapping[str, Any]:
        """Post ``text`` to ``channel_id``."""
