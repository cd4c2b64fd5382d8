"""
REST client for the Eludris HTTP API.

Each method is a single request. Non-2xx responses raise HttpRequestError
with the response body as ``detail``; user and session payloads are returned
as plain dicts.
"""

from __future__ import annotations

from typing import Any

import httpx

from evangeline.config import ConnectionConfig
from evangeline.http import HTTPClient
from evangeline.models import Message


class RESTClient(HTTPClient):
    """Async client for the REST base URL."""

    tag = "rest"

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(
            base_url or ConnectionConfig().rest_url,
            token=token,
            timeout=timeout,
            client=client,
        )

    @classmethod
    def from_config(
        cls, config: ConnectionConfig, client: httpx.AsyncClient | None = None
    ) -> "RESTClient":
        return cls(
            config.rest_url,
            token=config.token,
            timeout=config.request_timeout,
            client=client,
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def create_message(self, author: str, content: str) -> Message:
        """POST /messages and return the created message."""
        data = await self._request_json(
            "POST", "/messages", json={"author": author, "content": content}
        )
        return Message.from_dict(data or {"author": author, "content": content})

    # ------------------------------------------------------------------
    # Instance
    # ------------------------------------------------------------------

    async def get_instance_info(self, rate_limits: bool = False) -> dict[str, Any]:
        params = {"rate_limits": ""} if rate_limits else None
        return await self._request_json("GET", "/", params=params)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, username: str, email: str, password: str) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            "/users",
            json={"username": username, "email": email, "password": password},
        )

    async def delete_user(self, password: str, token: str | None = None) -> None:
        await self._request("DELETE", "/users", json={"password": password}, token=token)

    async def get_self(self) -> dict[str, Any]:
        return await self._request_json("GET", "/users/@me")

    async def get_user(self, user: str) -> dict[str, Any]:
        """Fetch a user by ID or username."""
        return await self._request_json("GET", f"/users/{user}")

    async def update_profile(self, **fields: Any) -> dict[str, Any]:
        return await self._request_json("PATCH", "/users/profile", json=fields)

    async def update_user(self, **fields: Any) -> dict[str, Any]:
        return await self._request_json("PATCH", "/users", json=fields)

    async def verify_user(self, code: int) -> None:
        await self._request("POST", "/users/verify", params={"code": code})

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(
        self,
        identifier: str,
        password: str,
        *,
        platform: str = "python",
        client: str = "evangeline",
    ) -> dict[str, Any]:
        return await self._request_json(
            "POST",
            "/sessions",
            json={
                "identifier": identifier,
                "password": password,
                "platform": platform,
                "client": client,
            },
        )

    async def delete_session(self, session_id: str, password: str) -> None:
        await self._request("DELETE", f"/sessions/{session_id}", json={"password": password})

    async def get_sessions(self) -> list[dict[str, Any]]:
        return await self._request_json("GET", "/sessions") or []
