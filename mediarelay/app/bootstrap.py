"""Wire configured components into a running relay."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.http_client import HttpClient
from ..core.resolver import HandlerChain
from ..handlers import build_handlers
from ..platforms.guilded import (
    GuildedApiClient,
    GuildedContentClient,
    GuildedCredentialStore,
    GuildedMediaUploader,
)
from ..services import MediaThreadPublisher, MessageDispatcher
from ..settings import AppConfig
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Relay:
    config: AppConfig
    chain: HandlerChain
    api: GuildedApiClient
    publisher: MediaThreadPublisher
    dispatcher: MessageDispatcher
    handler_http: HttpClient
    guilded_http: HttpClient

    async def connect(self) -> None:
        await self.api.connect()
        LOGGER.info("Relay is logged in and ready", extra={"event": "relay.ready"})

    def close(self) -> None:
        self.handler_http.close()
        self.guilded_http.close()


def build_chain(config: AppConfig, http: HttpClient) -> HandlerChain:
    """Instantiate the configured handlers, in order, into a chain."""
    return HandlerChain(build_handlers(config.relay.handlers, http, config.options_for))


def build_relay(config: AppConfig) -> Relay:
    # Handlers browse arbitrary sites, so they never share the Guilded session cookies.
    handler_http = HttpClient(http_settings=config.http)
    guilded_http = HttpClient(http_settings=config.http)

    credentials = GuildedCredentialStore(
        session_cache_path=config.paths.session_cache,
        env_email_key=config.guilded.email_env,
        env_password_key=config.guilded.password_env,
    )
    api = GuildedApiClient(guilded_http, config.guilded, credentials=credentials)
    content = GuildedContentClient(api)
    publisher = MediaThreadPublisher(
        GuildedMediaUploader(api),
        content,
        concurrent_uploads=config.relay.concurrent_uploads,
        title_limit=config.relay.title_limit,
    )
    chain = build_chain(config, handler_http)
    dispatcher = MessageDispatcher.from_settings(config.relay, chain, publisher, content)

    return Relay(
        config=config,
        chain=chain,
        api=api,
        publisher=publisher,
        dispatcher=dispatcher,
        handler_http=handler_http,
        guilded_http=guilded_http,
    )
