"""
Bot: the public entry point.

Binds an author name to a gateway connection (receive) and the REST/CDN
clients (send). Everything here is a thin call-through.
"""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from evangeline.cdn import CDNClient, FileSource
from evangeline.config import ConnectionConfig
from evangeline.errors import EmptyMessageError
from evangeline.events import EventHandler, EventKind
from evangeline.gateway import ConnectionState, GatewayConnection
from evangeline.models import FileData, Message
from evangeline.rest import RESTClient


class Bot:
    """An Eludris bot.

    Usage::

        bot = Bot("evangeline bot")

        @bot.on("messageCreate")
        async def echo(message):
            if message.content == "!ping":
                await bot.send("pong")

        await bot.run()
    """

    def __init__(
        self,
        author: str,
        config: ConnectionConfig | None = None,
        *,
        gateway: GatewayConnection | None = None,
        rest: RESTClient | None = None,
        cdn: CDNClient | None = None,
    ) -> None:
        self.config = config or ConnectionConfig()
        self.gateway = gateway or GatewayConnection(author, self.config)
        self.rest = rest or RESTClient.from_config(self.config)
        self.cdn = cdn or CDNClient.from_config(self.config)

    @property
    def author(self) -> str:
        return self.gateway.identity

    @property
    def state(self) -> ConnectionState:
        return self.gateway.state

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(
        self, event: EventKind | str, handler: EventHandler | None = None
    ) -> Any:
        """Register a handler, directly or as a decorator.

        ``bot.on("ready", fn)`` returns the bot; ``@bot.on("ready")`` returns
        the decorated function unchanged.
        """
        if handler is not None:
            self.gateway.on(event, handler)
            return self

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self.gateway.on(event, fn)
            return fn

        return decorator

    def off(self, event: EventKind | str, handler: EventHandler) -> "Bot":
        self.gateway.off(event, handler)
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        await self.gateway.connect()

    async def close(self) -> None:
        await self.gateway.close()

    async def wait_closed(self) -> None:
        await self.gateway.wait_closed()

    async def run(self) -> None:
        """Connect and block until the gateway closes."""
        await self.connect()
        await self.wait_closed()

    async def aclose(self) -> None:
        """Close the gateway and release both HTTP clients."""
        try:
            await self.gateway.close()
        finally:
            try:
                await self.rest.aclose()
            finally:
                await self.cdn.aclose()

    async def __aenter__(self) -> "Bot":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send_message(self, content: str) -> Message:
        """Post a message as this bot's author."""
        if not content:
            raise EmptyMessageError()
        logger.debug(f"[bot] send {content[:80]!r}")
        return await self.rest.create_message(self.author, content)

    async def send(self, content: str) -> Message:
        """Alias for send_message."""
        return await self.send_message(content)

    async def upload_attachment(
        self,
        file: FileSource,
        name: str | None = None,
        spoiler: bool = False,
    ) -> FileData:
        return await self.cdn.upload_attachment(file, name, spoiler)

    def attachment_url(self, file_id: str) -> str:
        return self.cdn.attachment_url(file_id)
