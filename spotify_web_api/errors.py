"""Errors raised by the Spotify Web API request layer."""

from __future__ import annotations

from typing import Any


class SpotifyRequestError(RuntimeError):
    """Response from Spotify could not be parsed and was not a success."""

    def __init__(self, message: str, *, status: int, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
