"""Entry point for inbound chat messages."""

from __future__ import annotations

from mediarelay.core.errors import RelayError, user_message
from mediarelay.core.resolver import HandlerChain
from mediarelay.platforms import InboundMessage, MessageSender
from mediarelay.settings import RelaySettings
from mediarelay.utils.links import extract_channel_mentions, first_link
from mediarelay.utils.logging import get_logger

from .models import PublishResult, ReplyPublishError
from .publishing_service import MediaThreadPublisher

LOGGER = get_logger(__name__)


class MessageDispatcher:
    """Relays the first link of each message as a media post.

    Messages without a link are ordinary traffic and are ignored. Every
    failure stays scoped to the message that caused it: failures with a
    readable message are echoed into the originating channel, silent ones
    (such as no handler matching) only reach the logs.
    """

    def __init__(
        self,
        resolver: HandlerChain,
        publisher: MediaThreadPublisher,
        sender: MessageSender,
        *,
        default_channel: str | None = None,
        failure_prefix: str = "❌",
    ) -> None:
        self._resolver = resolver
        self._publisher = publisher
        self._sender = sender
        self._default_channel = default_channel
        self._failure_prefix = failure_prefix

    @classmethod
    def from_settings(
        cls,
        settings: RelaySettings,
        resolver: HandlerChain,
        publisher: MediaThreadPublisher,
        sender: MessageSender,
    ) -> "MessageDispatcher":
        return cls(
            resolver,
            publisher,
            sender,
            default_channel=settings.default_channel,
            failure_prefix=settings.failure_prefix,
        )

    def target_channel(self, message: InboundMessage) -> str | None:
        """First channel mentioned in the message, else the configured default."""
        mentions = extract_channel_mentions(message.document)
        return mentions[0] if mentions else self._default_channel

    async def on_message(self, message: InboundMessage) -> PublishResult | None:
        url = first_link(message.document)
        if url is None:
            return None

        target = self.target_channel(message)
        if target is None:
            LOGGER.debug("Ignoring link without a target channel", extra={"url": url})
            return None

        try:
            result = await self._resolver.resolve(url)
            return await self._publisher.publish(target, result)
        except ReplyPublishError as exc:
            await self._report_failure(message, exc)
            return exc.result
        except Exception as exc:
            await self._report_failure(message, exc)
            return None

    async def _report_failure(self, message: InboundMessage, exc: Exception) -> None:
        text = user_message(exc)
        if not text:
            LOGGER.info(
                "Bail without message: %s",
                str(exc) or type(exc).__name__,
                extra={"event": "dispatch.silent_failure", "channel_id": message.channel_id},
            )
            return

        LOGGER.warning(
            "Bail: %s",
            exc,
            exc_info=not isinstance(exc, RelayError),
            extra={"event": "dispatch.failure", "channel_id": message.channel_id},
        )
        try:
            await self._sender.send_message(message.channel_id, f"{self._failure_prefix} {text}")
        except Exception as send_exc:
            LOGGER.error(
                "Could not report failure to channel %s: %s",
                message.channel_id,
                send_exc,
                extra={"event": "dispatch.notify_failed"},
            )
