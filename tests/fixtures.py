"""Shared test fixtures and utilities.

Fakes for the ``requests`` session the service clients use, plus output
capture helpers for CLI tests.
"""

from __future__ import annotations

import io
import json
import os
import tempfile
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


# -----------------------------------------------------------------------------
# HTTP fakes
# -----------------------------------------------------------------------------


class FakeResponse:
    """Stand-in for ``requests.Response`` (status, text, context manager)."""

    def __init__(self, status: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status
        if text is not None:
            self.text = text
        elif body is None:
            self.text = ""
        else:
            self.text = json.dumps(body)
        self.closed = False

    def json(self):
        return json.loads(self.text)

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass
class FakeSession:
    """Records every request and replays queued responses in order.

    Queue an exception instance to have the request raise it instead.
    """

    responses: List[Any] = field(default_factory=list)
    calls: List[Dict[str, Any]] = field(default_factory=list)
    returned: List[FakeResponse] = field(default_factory=list)

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "json": json,
                "headers": headers or {},
                "timeout": timeout,
            }
        )
        if not self.responses:
            raise AssertionError(f"No response queued for {method} {url}")
        resp = self.responses.pop(0)
        if isinstance(resp, BaseException):
            raise resp
        self.returned.append(resp)
        return resp

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


def feed_json(feed_id: str = "f1", name: str = "Work", token: str = "tok1") -> Dict[str, Any]:
    """A feed as the cal API lists it (CapitalizedKeys)."""
    return {
        "ID": feed_id,
        "Name": name,
        "Token": token,
        "CreatedAt": "2026-01-15T10:00:00Z",
        "UpdatedAt": "2026-01-15T10:00:00Z",
    }


def event_json(event_id: str = "evt-1", feed_id: str = "feed-1", **overrides: Any) -> Dict[str, Any]:
    """An event as the cal API returns it (CapitalizedKeys)."""
    data = {
        "ID": event_id,
        "FeedID": feed_id,
        "Summary": "Meeting",
        "Description": "",
        "Location": "",
        "URL": "",
        "Start": "2026-02-01T14:00:00Z",
        "End": "2026-02-01T15:00:00Z",
        "AllDay": False,
        "Deadline": None,
        "Status": "CONFIRMED",
        "Categories": "",
        "CreatedAt": "2026-02-01T14:00:00Z",
        "UpdatedAt": "2026-02-01T14:00:00Z",
    }
    data.update(overrides)
    return data


def message_json(
    msg_id: str,
    content: str = "",
    username: str = "alice",
    global_name: Optional[str] = None,
    timestamp: str = "2026-02-18T10:30:00.000000+00:00",
    reply_to: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """A Discord message object."""
    return {
        "id": msg_id,
        "content": content,
        "timestamp": timestamp,
        "author": {"id": "u-" + username, "username": username, "global_name": global_name},
        "referenced_message": reply_to,
    }


# -----------------------------------------------------------------------------
# Config helpers
# -----------------------------------------------------------------------------


@contextmanager
def temp_rc_file(content: str) -> Iterator[Path]:
    """Yield a path to a temporary .pylonrc with ``content``."""
    with tempfile.TemporaryDirectory() as td:
        path = Path(td) / ".pylonrc"
        path.write_text(content, encoding="utf-8")
        yield path


def clean_env(**overrides: str) -> Dict[str, str]:
    """An environ mapping with no PYLON_* variables, plus ``overrides``."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("PYLON_")}
    env.update(overrides)
    return env


# -----------------------------------------------------------------------------
# Output capture helpers
# -----------------------------------------------------------------------------


@contextmanager
def capture_output():
    """Capture stdout and stderr; yields (out, err) StringIO buffers."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        yield out, err
