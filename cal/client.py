"""Client for the cal service REST API."""

from __future__ import annotations

from typing import List, Optional

import requests

from core.cli_errors import UsageError
from core.constants import DEFAULT_REQUEST_TIMEOUT
from core.http_client import JSONClient

from .models import CreateEventRequest, CreateFeedRequest, Event, Feed, FeedCreated


def webcal_url(url: str) -> str:
    """Rewrite an http(s) subscription URL to the webcal:// scheme."""
    for scheme in ("https://", "http://"):
        if url.startswith(scheme):
            return "webcal://" + url[len(scheme):]
    return url


def _require(value: Optional[str], what: str) -> str:
    if not value:
        raise UsageError(f"{what} is required")
    return value


class CalClient(JSONClient):
    """Feed and event CRUD against one cal service base URL."""

    service = "cal"

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        super().__init__(session=session, timeout=timeout)
        self.base_url = base_url.rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # --- feeds ---

    def create_feed(self, name: str, slug: Optional[str] = None) -> FeedCreated:
        """Create a feed.

        A slug becomes a readable subscription token (``my-calendar`` ->
        ``/cal/my-calendar.ics``); without one the server picks a UUID.
        """
        body = CreateFeedRequest(name=_require(name, "feed name"), slug=slug or None)
        data = self._request("POST", self._url("/api/feeds"), json_body=body.to_api(), expected=(201,))
        return FeedCreated.from_api(data)

    def list_feeds(self) -> List[Feed]:
        return Feed.list_from_api(self._request("GET", self._url("/api/feeds")) or [])

    def delete_feed(self, feed_id: str) -> None:
        """Delete a feed; the server also deletes its events."""
        self._request("DELETE", self._url(f"/api/feeds/{_require(feed_id, 'feed id')}"), expected=(204,))

    # --- events ---

    def create_event(self, request: CreateEventRequest) -> Event:
        data = self._request("POST", self._url("/api/events"), json_body=request.to_api(), expected=(201,))
        return Event.from_api(data)

    def list_events(self, feed_id: str) -> List[Event]:
        path = f"/api/feeds/{_require(feed_id, 'feed id')}/events"
        return Event.list_from_api(self._request("GET", self._url(path)) or [])

    def delete_event(self, event_id: str) -> None:
        self._request("DELETE", self._url(f"/api/events/{_require(event_id, 'event id')}"), expected=(204,))

    # --- subscriptions ---

    def subscribe_url(self, token: str) -> str:
        """Return the .ics subscription URL for a feed token (no network call)."""
        return f"{self.base_url}/cal/{token}.ics"
