"""Shared JSON-over-HTTP plumbing for the pylon service clients."""

from __future__ import annotations

import json
import logging
from typing import Any, Collection, Dict, List, Optional

import requests

from .cli_errors import APIError, DecodeError, NetworkError
from .constants import DEFAULT_REQUEST_TIMEOUT, USER_AGENT

LOG = logging.getLogger(__name__)


def error_message(body: str) -> str:
    """Pick the human-readable message out of an error body.

    Uses the ``error`` field of a JSON object when it is a non-empty string,
    otherwise the body text verbatim.
    """
    try:
        data = json.loads(body)
    except ValueError:
        return body
    if isinstance(data, dict):
        msg = data.get("error")
        if isinstance(msg, str) and msg:
            return msg
    return body


def api_error(resp: requests.Response, service: str) -> APIError:
    return APIError(resp.status_code, error_message(resp.text), service=service)


class JSONClient:
    """Base class for a service client bound to one ``requests.Session``.

    Subclasses call :meth:`_request` and get back the decoded JSON body (or
    None for empty bodies). Non-success statuses raise APIError, transport
    failures raise NetworkError and undecodable bodies raise DecodeError.
    """

    service = "api"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": USER_AGENT}

    def _request(
        self,
        method: str,
        url: str,
        *,
        expected: Collection[int] = (200,),
        params: Optional[Dict[str, object]] = None,
        json_body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        method = method.upper()
        all_headers = self._headers()
        if headers:
            all_headers.update(headers)
        LOG.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=all_headers,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise NetworkError(f"{self.service}: request timed out after {self.timeout}s: {method} {url}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"{self.service}: request failed: {method} {url}: {exc}") from exc

        with resp:
            LOG.debug("%s %s -> %s", method, url, resp.status_code)
            if resp.status_code not in expected:
                raise api_error(resp, self.service)
            text = resp.text
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError(f"{self.service}: invalid JSON in response to {method} {url}: {exc}") from exc


def expect_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"expected {what} object, got {type(data).__name__}")
    return data


def expect_list(data: Any, what: str) -> List[Any]:
    if not isinstance(data, list):
        raise DecodeError(f"expected list of {what}, got {type(data).__name__}")
    return data
