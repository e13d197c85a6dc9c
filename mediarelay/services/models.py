"""Data models for the media publishing workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from mediarelay.core.errors import RelayError
from mediarelay.platforms import MediaPost, ThreadedReply, UploadedAsset


@dataclass(slots=True)
class PublishResult:
    """Outcome of publishing one handler result."""

    post: MediaPost | None = None
    reply: ThreadedReply | None = None
    uploads: list[UploadedAsset] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    @property
    def published(self) -> bool:
        return self.post is not None


class ReplyPublishError(RelayError):
    """The media post exists but the reply with the remaining media failed."""

    def __init__(
        self,
        message: str,
        *,
        result: PublishResult,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.result = result
