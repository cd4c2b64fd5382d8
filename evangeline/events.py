"""
Gateway events and handler registry.

Every event the connection can produce is one of four frozen dataclasses.
Handlers are registered per ``EventKind`` and called with the arguments
returned by ``event.handler_args()``:

    ready          handler()
    messageCreate  handler(message)
    error          handler(cause)
    close          handler(code, reason)
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, Union

from loguru import logger

from evangeline.models import Message


class EventKind(str, Enum):
    READY = "ready"
    MESSAGE_CREATE = "messageCreate"
    ERROR = "error"
    CLOSE = "close"


@dataclass(frozen=True)
class Ready:
    kind: ClassVar[EventKind] = EventKind.READY

    def handler_args(self) -> tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class MessageCreate:
    message: Message
    kind: ClassVar[EventKind] = EventKind.MESSAGE_CREATE

    def handler_args(self) -> tuple[Any, ...]:
        return (self.message,)


@dataclass(frozen=True)
class Closed:
    code: int
    reason: str = ""
    kind: ClassVar[EventKind] = EventKind.CLOSE

    def handler_args(self) -> tuple[Any, ...]:
        return (self.code, self.reason)


@dataclass(frozen=True)
class ErrorEvent:
    cause: Exception
    kind: ClassVar[EventKind] = EventKind.ERROR

    def handler_args(self) -> tuple[Any, ...]:
        return (self.cause,)


GatewayEvent = Union[Ready, MessageCreate, Closed, ErrorEvent]

# Handlers may be plain functions or coroutine functions
EventHandler = Callable[..., Union[Awaitable[None], None]]


class EventRegistry:
    """One ordered handler list per event kind."""

    def __init__(self) -> None:
        self._handlers: dict[EventKind, list[EventHandler]] = {kind: [] for kind in EventKind}

    def add(self, kind: EventKind | str, handler: EventHandler) -> None:
        self._handlers[EventKind(kind)].append(handler)

    def remove(self, kind: EventKind | str, handler: EventHandler) -> None:
        try:
            self._handlers[EventKind(kind)].remove(handler)
        except ValueError:
            pass

    def count(self, kind: EventKind | str) -> int:
        return len(self._handlers[EventKind(kind)])

    async def dispatch(self, event: GatewayEvent) -> None:
        """Call every handler for ``event.kind`` in registration order.

        A handler that raises is logged and skipped; the rest still run.
        """
        args = event.handler_args()
        for handler in list(self._handlers[event.kind]):
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error(f"[events] {event.kind.value} handler {handler!r} failed: {exc}")
