from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import pytest

from mediarelay.app import cli
from mediarelay.app.cli import listen, main
from mediarelay.handlers import HandlerResult
from mediarelay.platforms import InboundMessage, MediaPost, UploadedAsset
from mediarelay.services import PublishResult, ReplyPublishError


class StubDispatcher:
    def __init__(self) -> None:
        self.messages: list[InboundMessage] = []

    async def on_message(self, message: InboundMessage) -> None:
        self.messages.append(message)


class StubRelay:
    def __init__(self) -> None:
        self.dispatcher = StubDispatcher()
        self.connected = False

    async def connect(self) -> None:
        self.connected = True


def _event(channel_id: str, **extra: Any) -> str:
    document = {"object": "document", "nodes": []}
    return json.dumps({"channelId": channel_id, "message": {"content": {"document": document}}, **extra})


@pytest.mark.asyncio
async def test_listen_dispatches_each_message_and_skips_bad_lines(caplog: pytest.LogCaptureFixture) -> None:
    relay = StubRelay()
    stream = io.StringIO(
        "\n".join(
            [
                _event("a"),
                "{broken",
                "",
                json.dumps({"t": "TeamMemberJoined", "d": {}}),
                _event("b"),
            ]
        )
        + "\n"
    )

    with caplog.at_level("WARNING"):
        exit_code = await listen(relay, stream)  # type: ignore[arg-type]

    assert exit_code == 0
    assert relay.connected
    assert sorted(m.channel_id for m in relay.dispatcher.messages) == ["a", "b"]
    assert "Skipping malformed event" in caplog.text


def test_handlers_command_prints_chain(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        f'[paths]\nstate_dir = "{tmp_path.as_posix()}"\n[relay]\nhandlers = ["opengraph", "direct"]\n',
        encoding="utf-8",
    )

    assert main(["--log-plain", "--config", str(config), "handlers"]) == 0

    assert capsys.readouterr().out.splitlines() == ["1. opengraph", "2. direct"]


def test_missing_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--log-plain"]) == 1
    assert "usage" in capsys.readouterr().err


class StubChain:
    async def resolve(self, url: str) -> HandlerResult:
        return HandlerResult.build(["a.png", "b.png"], title="T")


class ReplyFailingPublisher:
    async def publish(self, channel_id: str, result: HandlerResult) -> PublishResult:
        post = MediaPost(id=9, channel_id=channel_id, title="T", description="", tags=[], src="up:a")
        partial = PublishResult(post=post, uploads=[UploadedAsset("up:a"), UploadedAsset("up:b")])
        raise ReplyPublishError("Could not post the remaining media as a reply", result=partial)


class PublishRelay(StubRelay):
    def __init__(self) -> None:
        super().__init__()
        self.chain = StubChain()
        self.publisher = ReplyFailingPublisher()
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_publish_prints_summary_when_only_reply_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "config.toml"
    config.write_text(f'[paths]\nstate_dir = "{tmp_path.as_posix()}"\n', encoding="utf-8")
    relay = PublishRelay()
    monkeypatch.setattr(cli, "build_relay", lambda _config: relay)

    exit_code = main(
        ["--log-plain", "--config", str(config), "publish", "https://x.example/", "--channel", "c"]
    )

    out = capsys.readouterr().out
    summary = json.loads(out[out.index("{\n"):])
    assert exit_code == 1
    assert relay.closed
    assert summary["post_id"] == 9
    assert summary["reply_id"] is None
    assert summary["uploads"] == ["up:a", "up:b"]
    assert summary["reply_error"] == "Could not post the remaining media as a reply"
