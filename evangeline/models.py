"""
Wire payloads for messages and uploaded files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from evangeline.errors import InvalidIdentityError

MIN_IDENTITY_LENGTH = 2
MAX_IDENTITY_LENGTH = 32


def validate_identity(identity: str) -> str:
    """Return *identity* unchanged, or raise InvalidIdentityError."""
    if not MIN_IDENTITY_LENGTH <= len(identity) <= MAX_IDENTITY_LENGTH:
        raise InvalidIdentityError(identity)
    return identity


@dataclass
class Message:
    """A chat message, as posted to REST or delivered by the gateway."""

    author: str
    content: str
    id: str | None = None
    # Fields the server sent that we don't model
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"author": self.author, "content": self.content}
        if self.id is not None:
            d["id"] = self.id
        d.update(self.extra)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        extra = {k: v for k, v in data.items() if k not in ("author", "content", "id")}
        msg_id = data.get("id")
        return cls(
            author=str(data.get("author", "")),
            content=str(data.get("content", "")),
            id=str(msg_id) if msg_id is not None else None,
            extra=extra,
        )


@dataclass
class FileData:
    """Metadata returned by the CDN for an uploaded file."""

    id: str
    name: str
    bucket: str
    spoiler: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileData":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            bucket=data.get("bucket", "attachments"),
            spoiler=bool(data.get("spoiler", False)),
            metadata=data.get("metadata") or {},
        )
