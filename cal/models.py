"""Wire models for the cal service.

The cal API is not consistent about field names, so each shape maps its
fields explicitly:

- feed/event listings and created events use CapitalizedKeys (``ID``, ``FeedID``)
- the create-feed response uses lowercase keys (``id``, ``name``, ``token``, ``url``)
- request bodies use snake_case keys (``feed_id``, ``all_day``)
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.cli_errors import DecodeError
from core.http_client import expect_list, expect_object

EVENT_STATUSES = ("TENTATIVE", "CONFIRMED", "CANCELLED")

# Fractions arrive with 1 to 9 digits; fromisoformat wants exactly 6 before 3.11
_FRACTION_RE = re.compile(r"\.(\d+)")


def _six_digit_fraction(match: "re.Match[str]") -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp from the API; None and "" map to None."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DecodeError(f"expected timestamp string, got {type(value).__name__}")
    text = _FRACTION_RE.sub(_six_digit_fraction, value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise DecodeError(f"invalid timestamp {value!r}") from exc


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"field {key!r}: expected string, got {type(value).__name__}")
    return value


@dataclass
class Feed:
    """A calendar feed as listed by ``GET /api/feeds``."""

    id: str
    name: str
    token: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Any) -> "Feed":
        obj = expect_object(data, "feed")
        return cls(
            id=_str(obj, "ID"),
            name=_str(obj, "Name"),
            token=_str(obj, "Token"),
            created_at=parse_timestamp(obj.get("CreatedAt")),
            updated_at=parse_timestamp(obj.get("UpdatedAt")),
        )

    @classmethod
    def list_from_api(cls, data: Any) -> List["Feed"]:
        return [cls.from_api(item) for item in expect_list(data, "feeds")]


@dataclass
class FeedCreated:
    """Result of ``POST /api/feeds``."""

    id: str
    name: str
    token: str
    url: str

    @classmethod
    def from_api(cls, data: Any) -> "FeedCreated":
        obj = expect_object(data, "created feed")
        return cls(
            id=_str(obj, "id"),
            name=_str(obj, "name"),
            token=_str(obj, "token"),
            url=_str(obj, "url"),
        )


@dataclass
class CreateFeedRequest:
    name: str
    slug: Optional[str] = None

    def to_api(self) -> Dict[str, str]:
        body = {"name": self.name}
        if self.slug:
            body["slug"] = self.slug
        return body


@dataclass
class Event:
    """A calendar event as returned by the events endpoints."""

    id: str
    feed_id: str
    summary: str
    start: Optional[datetime]
    description: str = ""
    location: str = ""
    url: str = ""
    end: Optional[datetime] = None
    all_day: bool = False
    deadline: Optional[datetime] = None
    status: str = ""
    categories: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Any) -> "Event":
        obj = expect_object(data, "event")
        all_day = obj.get("AllDay", False)
        if not isinstance(all_day, bool):
            raise DecodeError(f"field 'AllDay': expected bool, got {type(all_day).__name__}")
        return cls(
            id=_str(obj, "ID"),
            feed_id=_str(obj, "FeedID"),
            summary=_str(obj, "Summary"),
            start=parse_timestamp(obj.get("Start")),
            description=_str(obj, "Description"),
            location=_str(obj, "Location"),
            url=_str(obj, "URL"),
            end=parse_timestamp(obj.get("End")),
            all_day=all_day,
            deadline=parse_timestamp(obj.get("Deadline")),
            status=_str(obj, "Status"),
            categories=_str(obj, "Categories"),
            created_at=parse_timestamp(obj.get("CreatedAt")),
            updated_at=parse_timestamp(obj.get("UpdatedAt")),
        )

    @classmethod
    def list_from_api(cls, data: Any) -> List["Event"]:
        return [cls.from_api(item) for item in expect_list(data, "events")]


@dataclass
class CreateEventRequest:
    """Body of ``POST /api/events``.

    Times are RFC 3339 strings and are sent as given; the server validates
    them. Empty optional fields are left out of the body.
    """

    feed_id: str
    summary: str
    start: str
    end: str = ""
    description: str = ""
    location: str = ""
    url: str = ""
    all_day: bool = False
    deadline: str = ""
    status: str = ""
    categories: str = ""

    def to_api(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "feed_id": self.feed_id,
            "summary": self.summary,
            "start": self.start,
        }
        optional = {
            "description": self.description,
            "location": self.location,
            "url": self.url,
            "end": self.end,
            "all_day": self.all_day,
            "deadline": self.deadline,
            "status": self.status,
            "categories": self.categories,
        }
        body.update({k: v for k, v in optional.items() if v})
        return body
