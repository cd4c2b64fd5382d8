"""
CDN client: file uploads, downloads and metadata.

Files live in buckets; user uploads go to the ``attachments`` bucket and are
publicly reachable at ``{cdn}/attachments/{id}``.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
import httpx
from loguru import logger

from evangeline.config import ConnectionConfig
from evangeline.http import HTTPClient
from evangeline.models import FileData

ATTACHMENTS_BUCKET = "attachments"

FileSource = bytes | str | Path


class CDNClient(HTTPClient):
    """Async client for the CDN base URL."""

    tag = "cdn"

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(
            base_url or ConnectionConfig().cdn_url,
            token=token,
            timeout=timeout,
            client=client,
        )

    @classmethod
    def from_config(
        cls, config: ConnectionConfig, client: httpx.AsyncClient | None = None
    ) -> "CDNClient":
        return cls(
            config.cdn_url,
            token=config.token,
            timeout=config.request_timeout,
            client=client,
        )

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    async def upload_file(
        self,
        bucket: str,
        file: FileSource,
        name: str | None = None,
        spoiler: bool = False,
    ) -> FileData:
        """Upload bytes or a local file to *bucket* as multipart form data."""
        content, filename = await _read_source(file, name)
        logger.info(f"[cdn] Uploading {filename!r} ({len(content)} bytes) to {bucket!r}")
        data = await self._request_json(
            "POST",
            f"/{bucket}",
            files={"file": (filename, content)},
            data={"spoiler": "true" if spoiler else "false"},
        )
        return FileData.from_dict(data)

    async def upload_attachment(
        self,
        file: FileSource,
        name: str | None = None,
        spoiler: bool = False,
    ) -> FileData:
        return await self.upload_file(ATTACHMENTS_BUCKET, file, name, spoiler)

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def attachment_url(self, file_id: str) -> str:
        """Public URL of an uploaded attachment."""
        return self.url(f"/{ATTACHMENTS_BUCKET}/{file_id}")

    async def download_file(self, bucket: str, file_id: str) -> bytes:
        response = await self._request("GET", f"/{bucket}/{file_id}/download")
        return response.content

    async def download_attachment(self, file_id: str) -> bytes:
        return await self.download_file(ATTACHMENTS_BUCKET, file_id)

    async def download_static_file(self, name: str) -> bytes:
        """Download an instance-provided static file."""
        response = await self._request("GET", f"/static/{name}/download")
        return response.content

    async def get_file_data(self, bucket: str, file_id: str) -> FileData:
        data = await self._request_json("GET", f"/{bucket}/{file_id}/data")
        return FileData.from_dict(data)

    async def get_attachment_data(self, file_id: str) -> FileData:
        return await self.get_file_data(ATTACHMENTS_BUCKET, file_id)


async def _read_source(file: FileSource, name: str | None) -> tuple[bytes, str]:
    """Resolve an upload source into (content, filename)."""
    if isinstance(file, bytes):
        if not name:
            raise ValueError("name is required when uploading raw bytes")
        return file, name

    path = Path(file).expanduser()
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()
    return content, name or path.name
