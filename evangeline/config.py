"""
Connection configuration.

Defaults point at the public Eludris instance. REST and CDN bases are stored
without a trailing slash so routes can be appended as ``f"{base}/messages"``.

Environment variables (see ``ConnectionConfig.from_env``):
    EVANGELINE_GATEWAY_URL          Gateway (WebSocket) URL
    EVANGELINE_REST_URL             REST base URL
    EVANGELINE_CDN_URL              CDN base URL
    EVANGELINE_TOKEN                Authorization token for REST calls
    EVANGELINE_HEARTBEAT_INTERVAL   Seconds between PING frames
    EVANGELINE_VALIDATE_IDENTITY    "false" to skip the author length check
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_GATEWAY_URL = "wss://ws.eludris.gay/"
DEFAULT_REST_URL = "https://api.eludris.gay"
DEFAULT_CDN_URL = "https://cdn.eludris.gay"
DEFAULT_HEARTBEAT_INTERVAL = 45.0


@dataclass(frozen=True)
class ConnectionConfig:
    """Endpoints and timers for one bot. Immutable after construction."""

    gateway_url: str = DEFAULT_GATEWAY_URL
    rest_url: str = DEFAULT_REST_URL
    cdn_url: str = DEFAULT_CDN_URL
    token: str | None = None

    # Gateway
    heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL
    open_timeout: float = 10.0
    validate_identity: bool = True     # False = send whatever author was given

    # HTTP
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.heartbeat_interval <= 0:
            raise ValueError("heartbeat_interval must be positive")
        object.__setattr__(self, "rest_url", self.rest_url.rstrip("/"))
        object.__setattr__(self, "cdn_url", self.cdn_url.rstrip("/"))

    @classmethod
    def from_env(cls, prefix: str = "EVANGELINE_") -> "ConnectionConfig":
        """Build a config from environment variables, falling back to defaults."""

        def env(key: str, default: str) -> str:
            return os.getenv(prefix + key, "").strip() or default

        return cls(
            gateway_url=env("GATEWAY_URL", DEFAULT_GATEWAY_URL),
            rest_url=env("REST_URL", DEFAULT_REST_URL),
            cdn_url=env("CDN_URL", DEFAULT_CDN_URL),
            token=env("TOKEN", "") or None,
            heartbeat_interval=float(env("HEARTBEAT_INTERVAL", str(DEFAULT_HEARTBEAT_INTERVAL))),
            validate_identity=env("VALIDATE_IDENTITY", "true").lower() != "false",
        )
