"""Media posts, threaded replies and chat messages on Guilded."""

from __future__ import annotations

import random
import uuid
from typing import Any, Sequence

from mediarelay.platforms.base import MediaDraft, MediaPost, ThreadedReply, UploadedAsset

from .api import GuildedApiClient, GuildedApiError
from .documents import captioned_image_node, message_value, text_message

REPLY_ID_RANGE = 2**28


class GuildedContentClient:
    """Client for the media, reply and message endpoints."""

    def __init__(self, api: GuildedApiClient, *, rng: random.Random | None = None) -> None:
        self._api = api
        self._rng = rng or random.Random()

    async def create_media(self, channel_id: str, draft: MediaDraft) -> MediaPost:
        body = {
            "additionalInfo": {},
            "description": draft.description,
            "src": draft.src,
            "tags": list(draft.tags),
            "title": draft.title,
            "type": draft.type,
        }
        data = await self._api.post(
            f"/channels/{channel_id}/media", body, failure="Could not create the media post"
        )

        post_id = data.get("id")
        if post_id is None:
            raise GuildedApiError(
                "Media post was created without an id", details={"response": data}
            )
        return MediaPost(
            id=post_id,
            channel_id=str(data.get("channelId") or channel_id),
            team_id=data.get("teamId"),
            title=draft.title,
            description=draft.description,
            tags=list(draft.tags),
            src=draft.src,
            type=draft.type,
        )

    async def create_media_reply(
        self, post: MediaPost, assets: Sequence[UploadedAsset]
    ) -> ThreadedReply:
        nodes = [captioned_image_node(asset.url) for asset in assets]
        # Reply ids are picked by the client; the platform only needs them not to collide.
        reply_id = self._rng.randrange(REPLY_ID_RANGE)
        body: dict[str, Any] = {
            "channelId": post.channel_id,
            "contentId": post.id,
            "contentType": "team_media",
            "gameId": None,
            "id": reply_id,
            "isContentReply": True,
            "message": message_value(nodes),
            "postId": post.id,
            "teamId": post.team_id,
        }
        await self._api.post(
            f"/content/team_media/{post.id}/replies",
            body,
            failure="Could not post the remaining media as a reply",
        )
        return ThreadedReply(id=reply_id, post_id=post.id, nodes=nodes)

    async def send_message(self, channel_id: str, text: str) -> dict[str, Any]:
        body = {"messageId": str(uuid.uuid4()), "content": text_message(text)}
        return await self._api.post(
            f"/channels/{channel_id}/messages", body, failure="Could not send chat message"
        )
