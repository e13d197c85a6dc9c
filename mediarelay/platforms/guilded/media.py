"""Guilded media upload implementation."""

from __future__ import annotations

from mediarelay.platforms.base import MediaUploader, UploadedAsset

from .api import GuildedApiClient, GuildedApiError


class GuildedMediaUploader(MediaUploader):
    """Asks the media host to ingest a remote file by URL."""

    _UPLOAD_PATH = "/media/upload"
    _MEDIA_TYPE = "ContentMedia"
    # The upload host requires a tracking id but never checks it.
    _TRACKING_ID = "r-0000000-0000000"

    def __init__(self, api: GuildedApiClient) -> None:
        self._api = api

    async def upload(self, source_url: str) -> UploadedAsset:
        payload = {
            "dynamicMediaTypeId": self._MEDIA_TYPE,
            "mediaInfo": {"src": source_url},
            "uploadTrackingId": self._TRACKING_ID,
        }
        data = await self._api.post_media(
            self._UPLOAD_PATH, payload, failure=f"Could not upload {source_url}"
        )

        remote_url = data.get("url")
        if not remote_url:
            raise GuildedApiError(
                f"Upload of {source_url} returned no media URL",
                details={"src": source_url, "response": data},
            )
        return UploadedAsset(url=str(remote_url), raw=data)
