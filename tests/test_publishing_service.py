"""Tests for the media post orchestration."""

from __future__ import annotations

import asyncio
from typing import Sequence

import pytest

from mediarelay.handlers import HandlerResult
from mediarelay.platforms import MediaDraft, MediaPost, ThreadedReply, UploadedAsset
from mediarelay.platforms.guilded import GuildedApiError
from mediarelay.services import MediaThreadPublisher, ReplyPublishError, truncate_title


class StubUploader:
    def __init__(self, failing: Sequence[str] = (), delays: dict[str, float] | None = None) -> None:
        self.failing = set(failing)
        self.delays = delays or {}
        self.calls: list[str] = []

    async def upload(self, source_url: str) -> UploadedAsset:
        self.calls.append(source_url)
        if source_url in self.delays:
            await asyncio.sleep(self.delays[source_url])
        if source_url in self.failing:
            raise GuildedApiError(f"Could not upload {source_url}")
        return UploadedAsset(url=f"uploaded:{source_url}")


class StubContent:
    def __init__(self, *, fail_post: bool = False, fail_reply: bool = False) -> None:
        self.fail_post = fail_post
        self.fail_reply = fail_reply
        self.drafts: list[tuple[str, MediaDraft]] = []
        self.replies: list[tuple[MediaPost, list[UploadedAsset]]] = []

    async def create_media(self, channel_id: str, draft: MediaDraft) -> MediaPost:
        self.drafts.append((channel_id, draft))
        if self.fail_post:
            raise GuildedApiError("Could not create the media post")
        return MediaPost(
            id=101,
            channel_id=channel_id,
            title=draft.title,
            description=draft.description,
            tags=draft.tags,
            src=draft.src,
        )

    async def create_media_reply(
        self, post: MediaPost, assets: Sequence[UploadedAsset]
    ) -> ThreadedReply:
        self.replies.append((post, list(assets)))
        if self.fail_reply:
            raise GuildedApiError("Could not post the remaining media as a reply")
        return ThreadedReply(id=7, post_id=post.id, nodes=[{"src": a.url} for a in assets])


def _result(*media: str, title: str = "T") -> HandlerResult:
    return HandlerResult.build(media, title=title, description="D", tags=["x"])


@pytest.mark.asyncio
async def test_two_uploads_create_post_and_reply() -> None:
    content = StubContent()
    publisher = MediaThreadPublisher(StubUploader(), content)

    outcome = await publisher.publish("chan", _result("urlA", "urlB"))

    channel_id, draft = content.drafts[0]
    assert channel_id == "chan"
    assert draft.src == "uploaded:urlA"
    assert (draft.title, draft.description, draft.tags, draft.type) == ("T", "D", ["x"], "image")
    assert len(content.replies) == 1
    post, assets = content.replies[0]
    assert post is outcome.post
    assert [asset.url for asset in assets] == ["uploaded:urlB"]
    assert outcome.reply is not None and outcome.reply.post_id == 101
    assert outcome.errors == []


@pytest.mark.asyncio
async def test_single_surviving_upload_posts_without_reply(caplog: pytest.LogCaptureFixture) -> None:
    content = StubContent()
    publisher = MediaThreadPublisher(StubUploader(failing=["urlB"]), content)

    with caplog.at_level("WARNING"):
        outcome = await publisher.publish("chan", _result("urlA", "urlB"))

    assert outcome.post is not None and outcome.post.src == "uploaded:urlA"
    assert outcome.reply is None
    assert content.replies == []
    assert len(outcome.errors) == 1
    assert "1 error(s) encountered" in caplog.text


@pytest.mark.asyncio
async def test_first_successful_upload_becomes_primary() -> None:
    content = StubContent()
    uploader = StubUploader(failing=["urlA"])
    publisher = MediaThreadPublisher(uploader, content)

    outcome = await publisher.publish("chan", _result("urlA", "urlB", "urlC", "urlD"))

    assert uploader.calls == ["urlA", "urlB", "urlC", "urlD"]
    assert content.drafts[0][1].src == "uploaded:urlB"
    assert [a.url for a in content.replies[0][1]] == ["uploaded:urlC", "uploaded:urlD"]
    assert outcome.reply is not None


@pytest.mark.asyncio
async def test_all_uploads_failing_creates_nothing() -> None:
    content = StubContent()
    publisher = MediaThreadPublisher(StubUploader(failing=["urlA", "urlB"]), content)

    outcome = await publisher.publish("chan", _result("urlA", "urlB"))

    assert not outcome.published
    assert content.drafts == []
    assert len(outcome.errors) == 2


@pytest.mark.asyncio
async def test_empty_media_list_attempts_nothing() -> None:
    uploader = StubUploader()
    content = StubContent()
    publisher = MediaThreadPublisher(uploader, content)

    outcome = await publisher.publish("chan", _result())

    assert uploader.calls == []
    assert content.drafts == []
    assert outcome.post is None


@pytest.mark.asyncio
async def test_post_failure_propagates_and_skips_reply() -> None:
    content = StubContent(fail_post=True)
    publisher = MediaThreadPublisher(StubUploader(), content)

    with pytest.raises(GuildedApiError, match="Could not create the media post"):
        await publisher.publish("chan", _result("urlA", "urlB"))

    assert content.replies == []


@pytest.mark.asyncio
async def test_reply_failure_keeps_created_post() -> None:
    content = StubContent(fail_reply=True)
    publisher = MediaThreadPublisher(StubUploader(), content)

    with pytest.raises(ReplyPublishError) as excinfo:
        await publisher.publish("chan", _result("urlA", "urlB"))

    assert excinfo.value.message == "Could not post the remaining media as a reply"
    assert excinfo.value.result.post is not None
    assert excinfo.value.result.post.id == 101
    assert excinfo.value.result.reply is None


@pytest.mark.asyncio
async def test_long_title_is_cut_to_eighty_characters() -> None:
    content = StubContent()
    publisher = MediaThreadPublisher(StubUploader(), content)

    await publisher.publish("chan", _result("urlA", title="x" * 120))
    await publisher.publish("chan", _result("urlA", title="y" * 80))

    assert content.drafts[0][1].title == "x" * 80
    assert content.drafts[1][1].title == "y" * 80


def test_truncate_title_passes_short_titles_through() -> None:
    assert truncate_title("short") == "short"
    assert truncate_title("") == ""
    assert len(truncate_title("z" * 81)) == 80


@pytest.mark.asyncio
async def test_concurrent_uploads_keep_source_order() -> None:
    content = StubContent()
    # urlA finishes last but must still be the primary asset.
    uploader = StubUploader(delays={"urlA": 0.05, "urlB": 0.0, "urlC": 0.01})
    publisher = MediaThreadPublisher(uploader, content, concurrent_uploads=True)

    outcome = await publisher.publish("chan", _result("urlA", "urlB", "urlC"))

    assert [a.url for a in outcome.uploads] == ["uploaded:urlA", "uploaded:urlB", "uploaded:urlC"]
    assert content.drafts[0][1].src == "uploaded:urlA"


@pytest.mark.asyncio
async def test_concurrent_uploads_collect_failures() -> None:
    content = StubContent()
    uploader = StubUploader(failing=["urlA"])
    publisher = MediaThreadPublisher(uploader, content, concurrent_uploads=True)

    outcome = await publisher.publish("chan", _result("urlA", "urlB"))

    assert content.drafts[0][1].src == "uploaded:urlB"
    assert outcome.reply is None
    assert len(outcome.errors) == 1
