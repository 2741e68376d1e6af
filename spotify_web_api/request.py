"""HTTP request layer for the Spotify account and Web API hosts."""

from __future__ import annotations

import logging
from typing import Any

import requests

from config.settings import SPOTIFY_ACCOUNT_URL, SPOTIFY_API_URL, SPOTIFY_TIMEOUT_SECONDS
from spotify_web_api.errors import SpotifyRequestError

logger = logging.getLogger(__name__)

_QUERY_METHODS = frozenset({"GET", "DELETE"})


class Request:
    """Send one request to Spotify and return its parsed response.

    Every call returns a dict with ``body``, ``headers``, ``status`` and
    ``url`` keys. ``body`` is the decoded JSON document. Connection errors and
    timeouts from ``requests`` are not caught here.
    """

    def __init__(
        self,
        *,
        account_url: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.account_url = (account_url or SPOTIFY_ACCOUNT_URL).rstrip("/")
        self.api_url = (api_url or SPOTIFY_API_URL).rstrip("/")
        self.timeout = SPOTIFY_TIMEOUT_SECONDS if timeout is None else float(timeout)
        self._session = session or requests.Session()

    def account(
        self,
        method: str,
        path: str,
        parameters: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make a request against the account host (authorize, token)."""
        return self.send(method, self.account_url + path, parameters, headers)

    def api(
        self,
        method: str,
        path: str,
        parameters: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make a request against the Web API host."""
        return self.send(method, self.api_url + path, parameters, headers)

    def send(
        self,
        method: str,
        url: str,
        parameters: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send GET/DELETE parameters as the query string and other verbs as a form body."""
        method = method.upper()
        if method in _QUERY_METHODS:
            kwargs: dict[str, Any] = {"params": parameters or {}}
        else:
            kwargs = {"data": parameters or {}}

        response = self._session.request(
            method,
            url,
            headers=dict(headers or {}),
            timeout=self.timeout,
            **kwargs,
        )
        status = int(response.status_code)
        logger.info("[SPOTIFY] request=%s %s status=%s", method, url, status)

        return {
            "body": _parse_body(response, status),
            "headers": dict(response.headers),
            "status": status,
            "url": url,
        }


def _parse_body(response: requests.Response, status: int) -> Any:
    success = 200 <= status < 300
    if not response.content:
        if success:
            return {}
        raise SpotifyRequestError(f"spotify request failed: status={status}", status=status)
    try:
        return response.json()
    except ValueError:
        if success:
            return {}
        detail = (response.text or "").strip() or f"status={status}"
        raise SpotifyRequestError(
            f"spotify request failed: {detail}",
            status=status,
            body=response.text,
        ) from None
