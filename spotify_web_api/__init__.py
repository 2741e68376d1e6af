"""Spotify Web API authorization session."""

from spotify_web_api.errors import SpotifyRequestError
from spotify_web_api.request import Request
from spotify_web_api.session import AuthorizeOptions, Session, TokenError, TokenGrant

__all__ = [
    "AuthorizeOptions",
    "Request",
    "Session",
    "SpotifyRequestError",
    "TokenError",
    "TokenGrant",
]
