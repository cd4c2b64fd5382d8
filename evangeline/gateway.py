"""
Gateway: one persistent WebSocket session to the Eludris event stream.

- connect() opens exactly one socket (no-op unless IDLE or CLOSED)
- Application-level heartbeat: {"op": "PING"} every heartbeat_interval seconds
- Inbound frames: {"op": ..., "d": ...}; only MESSAGE_CREATE is dispatched,
  unknown ops are ignored
- Malformed frames are dropped and surfaced as an error event
- Lifecycle failures become events, never exceptions
- Reconnect is manual: call connect() again after a close event

States:
    IDLE/CLOSED --connect()--> CONNECTING --open--> OPEN
    OPEN --close()--> CLOSING --> CLOSED
    OPEN/CONNECTING --transport close--> CLOSED
    CONNECTING --connect() cancelled--> CLOSED
"""

from __future__ import annotations

import asyncio
import json
from enum import Enum
from typing import Any, Awaitable, Callable

import websockets
from loguru import logger
from websockets.exceptions import ConnectionClosed, WebSocketException

from evangeline.config import ConnectionConfig
from evangeline.errors import MalformedEventError, TransportError
from evangeline.events import (
    Closed,
    ErrorEvent,
    EventHandler,
    EventKind,
    EventRegistry,
    GatewayEvent,
    MessageCreate,
    Ready,
)
from evangeline.models import Message, validate_identity

OP_MESSAGE_CREATE = "MESSAGE_CREATE"
OP_PING = "PING"

# Close code reported when the socket went away without a close frame
ABNORMAL_CLOSURE = 1006

Connector = Callable[..., Awaitable[Any]]


class ConnectionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class GatewayConnection:
    """Owns one gateway socket and its heartbeat task.

    Usage::

        conn = GatewayConnection("my bot")
        conn.on("messageCreate", handle_message)
        await conn.connect()
        await conn.wait_closed()
    """

    def __init__(
        self,
        identity: str,
        config: ConnectionConfig | None = None,
        *,
        connector: Connector | None = None,
    ) -> None:
        self._identity = identity
        self.config = config or ConnectionConfig()
        self._connector: Connector = connector or websockets.connect

        self._state = ConnectionState.IDLE
        self._events = EventRegistry()

        # At most one of each at any time
        self._ws: Any = None
        self._reader_task: asyncio.Task | None = None
        self._heartbeat_task: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def heartbeat_active(self) -> bool:
        return self._heartbeat_task is not None

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def on(self, kind: EventKind | str, handler: EventHandler) -> "GatewayConnection":
        """Register a handler for one event kind. Returns self for chaining."""
        self._events.add(kind, handler)
        return self

    def off(self, kind: EventKind | str, handler: EventHandler) -> "GatewayConnection":
        """Remove a previously registered handler."""
        self._events.remove(kind, handler)
        return self

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the gateway socket.

        Raises InvalidIdentityError before touching the network when identity
        validation is enabled. Transport failures are emitted as ``error``
        followed by ``close`` and are not raised.
        """
        if self.config.validate_identity:
            validate_identity(self._identity)

        if self._state in (ConnectionState.CONNECTING, ConnectionState.OPEN, ConnectionState.CLOSING):
            logger.warning(f"[gateway] connect() ignored, already {self._state.value}")
            return

        self._state = ConnectionState.CONNECTING
        url = self.config.gateway_url
        logger.info(f"[gateway] Connecting to {url} as {self._identity!r}")

        try:
            # Keep-alive is the PING frame below, not protocol-level pings
            ws = await self._connector(
                url,
                ping_interval=None,
                open_timeout=self.config.open_timeout,
            )
        except (OSError, WebSocketException, asyncio.TimeoutError) as exc:
            logger.error(f"[gateway] Could not connect to {url}: {exc!r}")
            self._state = ConnectionState.CLOSED
            await self._emit(ErrorEvent(TransportError(f"could not connect to {url}", exc)))
            await self._emit(Closed(ABNORMAL_CLOSURE, str(exc)))
            return
        except asyncio.CancelledError:
            # No socket was handed over, so a later connect() must be allowed
            logger.info(f"[gateway] Connect to {url} cancelled")
            self._state = ConnectionState.CLOSED
            raise

        self._ws = ws
        self._state = ConnectionState.OPEN
        self._start_heartbeat()
        logger.info("[gateway] Connected")
        await self._emit(Ready())

        # A ready handler may already have closed the session
        if self._ws is ws:
            self._reader_task = asyncio.create_task(self._read_loop(ws), name="gateway:reader")

    async def close(self, code: int = 1000, reason: str = "") -> None:
        """Close the socket. Does nothing unless the connection is OPEN."""
        if self._state is not ConnectionState.OPEN:
            logger.debug(f"[gateway] close() ignored, state is {self._state.value}")
            return

        self._state = ConnectionState.CLOSING
        self._stop_heartbeat()
        ws, reader = self._ws, self._reader_task
        logger.info(f"[gateway] Closing ({code})")
        try:
            await ws.close(code, reason)
        except (OSError, WebSocketException) as exc:
            logger.warning(f"[gateway] Error sending close frame: {exc!r}")
        except asyncio.CancelledError:
            if reader is not None and reader is not asyncio.current_task():
                reader.cancel()
            raise
        finally:
            await self._on_transport_closed(
                ws,
                getattr(ws, "close_code", None) or code,
                getattr(ws, "close_reason", None) or reason,
            )

        # A close handler may already have started a new session
        if reader is not None and reader is not asyncio.current_task():
            await reader

    async def wait_closed(self) -> None:
        """Block until the current session's reader task has finished.

        Safe to call from a handler; it returns immediately there.
        """
        task = self._reader_task
        if task is not None and task is not asyncio.current_task():
            await task

    # ------------------------------------------------------------------
    # Transport callbacks
    # ------------------------------------------------------------------

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                await self._handle_frame(raw)
        except (ConnectionClosed, OSError) as exc:
            if self._ws is ws and self._state is ConnectionState.OPEN:
                logger.warning(f"[gateway] Transport error: {exc!r}")
                await self._emit(ErrorEvent(TransportError("gateway connection lost", exc)))
        finally:
            await self._on_transport_closed(
                ws,
                getattr(ws, "close_code", None) or ABNORMAL_CLOSURE,
                getattr(ws, "close_reason", None) or "",
            )

    async def _on_transport_closed(self, ws: Any, code: int, reason: str) -> None:
        """Single exit path out of OPEN/CLOSING; emits ``close`` once per session."""
        # Stale socket from a session that was already closed and replaced
        if ws is not self._ws:
            return
        self._state = ConnectionState.CLOSED
        self._stop_heartbeat()
        self._ws = None
        logger.info(f"[gateway] Closed ({code}) {reason}".rstrip())
        await self._emit(Closed(code, reason))

    async def _handle_frame(self, raw: str | bytes) -> None:
        try:
            envelope = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            await self._drop_malformed(f"frame is not valid JSON: {exc}", raw)
            return

        if not isinstance(envelope, dict):
            await self._drop_malformed("frame is not a JSON object", raw)
            return

        op = envelope.get("op")
        if op != OP_MESSAGE_CREATE:
            logger.trace(f"[gateway] Ignoring op {op!r}")
            return

        data = envelope.get("d")
        if not isinstance(data, dict):
            await self._drop_malformed("MESSAGE_CREATE without an object payload", raw)
            return

        await self._emit(MessageCreate(Message.from_dict(data)))

    async def _drop_malformed(self, message: str, raw: str | bytes) -> None:
        logger.warning(f"[gateway] Dropping malformed frame: {message}")
        await self._emit(ErrorEvent(MalformedEventError(message, raw)))

    async def _emit(self, event: GatewayEvent) -> None:
        await self._events.dispatch(event)

    # ------------------------------------------------------------------
    # Heartbeat
    # ------------------------------------------------------------------

    def _start_heartbeat(self) -> None:
        self._stop_heartbeat()
        self._heartbeat_task = asyncio.create_task(
            self._heartbeat_loop(), name="gateway:heartbeat"
        )

    def _stop_heartbeat(self) -> None:
        task, self._heartbeat_task = self._heartbeat_task, None
        if task is not None:
            task.cancel()

    async def _heartbeat_loop(self) -> None:
        frame = json.dumps({"op": OP_PING})
        while True:
            await asyncio.sleep(self.config.heartbeat_interval)
            ws = self._ws
            if self._state is not ConnectionState.OPEN or ws is None:
                return
            try:
                await ws.send(frame)
                logger.trace("[gateway] PING")
            except (ConnectionClosed, OSError) as exc:
                # The reader sees the same failure and drives the close
                logger.debug(f"[gateway] Heartbeat send failed: {exc!r}")
                return
