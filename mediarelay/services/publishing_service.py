"""High-level orchestration for publishing resolved media."""

from __future__ import annotations

import asyncio
from typing import Sequence

from mediarelay.core.errors import user_message
from mediarelay.handlers import HandlerResult
from mediarelay.platforms import MediaDraft, MediaPublisher, MediaUploader, UploadedAsset
from mediarelay.settings import TITLE_LIMIT
from mediarelay.utils.logging import get_logger

from .models import PublishResult, ReplyPublishError

LOGGER = get_logger(__name__)


def truncate_title(title: str, limit: int = TITLE_LIMIT) -> str:
    return title[:limit]


class MediaThreadPublisher:
    """Turns a handler result into a media post plus an optional threaded reply.

    Every media URL is uploaded; failed uploads are collected and logged but
    do not stop the others. The first successful upload (by position in the
    handler's list, never by completion time) becomes the post itself, and
    all later successful uploads go into a single reply under that post.
    """

    def __init__(
        self,
        uploader: MediaUploader,
        publisher: MediaPublisher,
        *,
        concurrent_uploads: bool = False,
        title_limit: int = TITLE_LIMIT,
    ) -> None:
        self._uploader = uploader
        self._publisher = publisher
        self._concurrent_uploads = concurrent_uploads
        self._title_limit = title_limit

    async def publish(self, channel_id: str, result: HandlerResult) -> PublishResult:
        uploads, errors = await self._collect_uploads(result.media)
        outcome = PublishResult(uploads=uploads, errors=errors)

        if errors:
            LOGGER.warning(
                "%d error(s) encountered while uploading media",
                len(errors),
                extra={"event": "publish.upload_errors", "channel_id": channel_id},
            )
            for error in errors:
                LOGGER.warning("Upload failed: %s", error)

        if not uploads:
            LOGGER.info(
                "No media to upload, stopping",
                extra={"event": "publish.empty", "channel_id": channel_id},
            )
            return outcome

        draft = MediaDraft(
            title=truncate_title(result.title, self._title_limit),
            description=result.description,
            tags=sorted(result.tags),
            src=uploads[0].url,
        )
        outcome.post = await self._publisher.create_media(channel_id, draft)
        LOGGER.info(
            "Created media post %s",
            outcome.post.id,
            extra={"event": "publish.post", "channel_id": channel_id},
        )

        if len(uploads) > 1:
            try:
                outcome.reply = await self._publisher.create_media_reply(outcome.post, uploads[1:])
            except Exception as exc:
                raise ReplyPublishError(
                    user_message(exc) or "Could not post the remaining media as a reply",
                    result=outcome,
                    details={"post_id": outcome.post.id, "reason": str(exc)},
                ) from exc
            LOGGER.info(
                "Replied to media post %s with %d more item(s)",
                outcome.post.id,
                len(uploads) - 1,
                extra={"event": "publish.reply", "channel_id": channel_id},
            )

        return outcome

    async def _collect_uploads(
        self, media: Sequence[str]
    ) -> tuple[list[UploadedAsset], list[Exception]]:
        if self._concurrent_uploads:
            # gather keeps results in argument order, whatever finishes first.
            outcomes = await asyncio.gather(
                *(self._uploader.upload(url) for url in media), return_exceptions=True
            )
        else:
            outcomes = []
            for url in media:
                try:
                    outcomes.append(await self._uploader.upload(url))
                except Exception as exc:
                    outcomes.append(exc)

        uploads: list[UploadedAsset] = []
        errors: list[Exception] = []
        for item in outcomes:
            if isinstance(item, Exception):
                errors.append(item)
            elif isinstance(item, BaseException):
                raise item
            else:
                uploads.append(item)
        return uploads, errors
