"""Command-line interface for the media relay."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Callable, Sequence, TextIO

from ..core.errors import RelayError, user_message
from ..core.http_client import HttpClient
from ..core.resolver import HandlerChain
from ..platforms.guilded import parse_event_line
from ..services import PublishResult, ReplyPublishError
from ..settings import load_config
from ..utils.logging import configure_logging, get_logger
from .bootstrap import Relay, build_chain, build_relay

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else "INFO",
        structured=not args.log_plain,
    )

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1
    return handler(args)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mediarelay",
        description="Republish linked media as Guilded media posts",
    )
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    handlers_parser = subparsers.add_parser("handlers", help="List the configured handler chain")
    handlers_parser.set_defaults(handler=_handle_handlers)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Run the handler chain on a URL and print the result"
    )
    resolve_parser.add_argument("url")
    resolve_parser.set_defaults(handler=_handle_resolve)

    publish_parser = subparsers.add_parser("publish", help="Resolve a URL and publish it once")
    publish_parser.add_argument("url")
    publish_parser.add_argument("--channel", required=True, help="Target media channel id")
    publish_parser.set_defaults(handler=_handle_publish)

    listen_parser = subparsers.add_parser(
        "listen", help="Dispatch gateway events read as JSON lines"
    )
    listen_parser.add_argument(
        "--input",
        default="-",
        help="File with one gateway event per line; '-' reads stdin",
    )
    listen_parser.set_defaults(handler=_handle_listen)

    return parser


def _handle_handlers(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    for position, name in enumerate(config.relay.handlers, start=1):
        print(f"{position}. {name}")
    return 0


def _handle_resolve(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    http = HttpClient(http_settings=config.http)
    try:
        chain = build_chain(config, http)
        result = asyncio.run(_resolve(chain, args.url))
    finally:
        http.close()
    if result is None:
        return 1
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


async def _resolve(chain: HandlerChain, url: str) -> dict[str, Any] | None:
    try:
        result = await chain.resolve(url)
    except RelayError as exc:
        print(user_message(exc) or f"No handler matched {url}", file=sys.stderr)
        return None
    return result.as_dict()


def _handle_publish(args: argparse.Namespace) -> int:
    relay = build_relay(load_config(args.config))
    LOGGER.info(
        "Publishing single URL",
        extra={"event": "cli.command", "command": "publish", "url": args.url},
    )
    reply_error: str | None = None
    try:
        outcome = asyncio.run(_publish(relay, args.url, args.channel))
    except ReplyPublishError as exc:
        LOGGER.warning(
            "Post created but the reply failed: %s",
            exc,
            extra={"event": "cli.error", "command": "publish"},
        )
        outcome = exc.result
        reply_error = exc.message
    except RelayError as exc:
        LOGGER.error(
            "Publish failed: %s", exc, extra={"event": "cli.error", "command": "publish"}
        )
        print(user_message(exc) or f"Nothing to publish for {args.url}", file=sys.stderr)
        return 1
    finally:
        relay.close()
    print(json.dumps(_summary(outcome, reply_error=reply_error), ensure_ascii=False, indent=2))
    return 0 if outcome.published and reply_error is None else 1


async def _publish(relay: Relay, url: str, channel: str) -> PublishResult:
    await relay.connect()
    result = await relay.chain.resolve(url)
    return await relay.publisher.publish(channel, result)


def _summary(outcome: PublishResult, *, reply_error: str | None = None) -> dict[str, Any]:
    return {
        "post_id": outcome.post.id if outcome.post else None,
        "reply_id": outcome.reply.id if outcome.reply else None,
        "uploads": [asset.url for asset in outcome.uploads],
        "errors": [str(error) for error in outcome.errors],
        "reply_error": reply_error,
    }


def _handle_listen(args: argparse.Namespace) -> int:
    relay = build_relay(load_config(args.config))
    stream: TextIO = sys.stdin if args.input == "-" else open(args.input, encoding="utf-8")
    try:
        return asyncio.run(listen(relay, stream))
    finally:
        if stream is not sys.stdin:
            stream.close()
        relay.close()


async def listen(relay: Relay, stream: TextIO) -> int:
    """Dispatch each event in ``stream`` as its own task and wait for all of them."""
    await relay.connect()
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task[PublishResult | None]] = set()

    while True:
        line = await loop.run_in_executor(None, stream.readline)
        if not line:
            break
        try:
            message = parse_event_line(line)
        except ValueError as exc:
            LOGGER.warning("Skipping malformed event: %s", exc, extra={"event": "listen.bad_event"})
            continue
        if message is None:
            continue
        task = asyncio.create_task(relay.dispatcher.on_message(message))
        pending.add(task)
        task.add_done_callback(pending.discard)

    if pending:
        await asyncio.gather(*pending)
    LOGGER.info("Event stream closed", extra={"event": "listen.closed"})
    return 0


__all__ = ["main", "listen"]
