"""
Shared async HTTP plumbing for the REST and CDN clients.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from evangeline.errors import HttpRequestError


class HTTPClient:
    """Base for clients that talk to one HTTP base URL.

    Args:
        base_url: Base URL without a trailing slash.
        token: Optional value for the ``Authorization`` header.
        timeout: Request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient`` (tests inject one with a
            mock transport). Clients passed in are not closed by ``aclose``.
    """

    tag = "http"

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def url(self, route: str) -> str:
        return f"{self.base_url}/{route.lstrip('/')}"

    async def _request(
        self,
        method: str,
        route: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> httpx.Response:
        """Send a request and return the response, raising on non-2xx."""
        url = self.url(route)
        headers: dict[str, str] = {}
        auth = token or self.token
        if auth:
            headers["Authorization"] = auth

        logger.debug(f"[{self.tag}] {method} {url}")
        response = await self._client.request(
            method,
            url,
            json=json,
            params=params,
            files=files,
            data=data,
            headers=headers,
        )

        if not response.is_success:
            detail = response.text
            logger.warning(f"[{self.tag}] {method} {url} -> {response.status_code}: {detail[:200]!r}")
            raise HttpRequestError(method, url, response.status_code, detail)
        return response

    async def _request_json(self, method: str, route: str, **kwargs: Any) -> Any:
        response = await self._request(method, route, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            url = self.url(route)
            logger.warning(f"[{self.tag}] {method} {url} returned a non-JSON body: {exc}")
            raise HttpRequestError(method, url, response.status_code, response.text) from exc
