"""
Exception types raised or emitted by evangeline.

Connection lifecycle errors are delivered to ``error`` handlers rather than
raised; request errors are raised to whoever awaited the request.
"""

from __future__ import annotations


class EvangelineError(Exception):
    """Base class for all evangeline errors."""


class InvalidIdentityError(EvangelineError, ValueError):
    """The bot's author name is not 2-32 characters long."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(
            f"author {identity!r} is not 2-32 characters long (got {len(identity)})"
        )


class EmptyMessageError(EvangelineError, ValueError):
    """Message content is empty."""

    def __init__(self) -> None:
        super().__init__("Message content cannot be empty")


class TransportError(EvangelineError):
    """The gateway socket failed to open or broke while open."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class MalformedEventError(EvangelineError):
    """An inbound gateway frame could not be decoded into an event."""

    def __init__(self, message: str, raw: str | bytes) -> None:
        super().__init__(message)
        self.raw = raw


class HttpRequestError(EvangelineError):
    """A REST or CDN request failed: a non-2xx status or an unreadable body."""

    def __init__(self, method: str, url: str, status_code: int, detail: str) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{method} {url} failed with {status_code}: {detail}")
