"""Discord API objects used by pylon (read-only)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from core.cli_errors import DecodeError
from core.http_client import expect_list, expect_object

# Discord channel type for a guild text channel
TEXT_CHANNEL_TYPE = 0


@dataclass
class Author:
    username: str = ""
    global_name: str = ""

    @property
    def display_name(self) -> str:
        return self.global_name or self.username

    @classmethod
    def from_api(cls, data: Any) -> "Author":
        if data is None:
            return cls()
        obj = expect_object(data, "author")
        return cls(username=obj.get("username") or "", global_name=obj.get("global_name") or "")


@dataclass
class MessageReference:
    """The parent of a reply."""

    content: str = ""
    author: Author = field(default_factory=Author)


@dataclass
class Message:
    id: str
    content: str = ""
    timestamp: str = ""
    author: Author = field(default_factory=Author)
    reference: Optional[MessageReference] = None

    @classmethod
    def from_api(cls, data: Any) -> "Message":
        obj = expect_object(data, "message")
        ref = obj.get("referenced_message")
        reference = None
        if ref is not None:
            ref_obj = expect_object(ref, "referenced message")
            reference = MessageReference(
                content=ref_obj.get("content") or "",
                author=Author.from_api(ref_obj.get("author")),
            )
        return cls(
            id=str(obj.get("id") or ""),
            content=obj.get("content") or "",
            timestamp=obj.get("timestamp") or "",
            author=Author.from_api(obj.get("author")),
            reference=reference,
        )

    @classmethod
    def list_from_api(cls, data: Any) -> List["Message"]:
        return [cls.from_api(item) for item in expect_list(data, "messages")]


@dataclass
class Channel:
    id: str
    name: str
    type: int
    position: int = 0

    @property
    def is_text(self) -> bool:
        return self.type == TEXT_CHANNEL_TYPE

    @classmethod
    def from_api(cls, data: Any) -> "Channel":
        obj = expect_object(data, "channel")
        try:
            kind = int(obj.get("type", -1))
            position = int(obj.get("position") or 0)
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"invalid channel {obj.get('id')!r}: {exc}") from exc
        return cls(
            id=str(obj.get("id") or ""),
            name=obj.get("name") or "",
            type=kind,
            position=position,
        )

    @classmethod
    def list_from_api(cls, data: Any) -> List["Channel"]:
        return [cls.from_api(item) for item in expect_list(data, "channels")]
