"""OAuth2 authorization code session for the Spotify Web API."""

from __future__ import annotations

import base64
import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields
from typing import Any
from urllib.parse import urlencode

from spotify_web_api.request import Request

_LOG = logging.getLogger(__name__)

_TOKEN_PATH = "/api/token"


@dataclass(frozen=True)
class AuthorizeOptions:
    """Options for the authorization URL.

    - ``scope``: permissions to request, sent space separated in given order.
    - ``show_dialog``: force the user to approve the app again.
    - ``state``: opaque CSRF token echoed back on the redirect.
    """

    scope: Sequence[str] = field(default_factory=tuple)
    show_dialog: bool = False
    state: str = ""

    def __post_init__(self) -> None:
        scope = self.scope
        object.__setattr__(self, "scope", (scope,) if isinstance(scope, str) else tuple(scope or ()))
        object.__setattr__(self, "show_dialog", bool(self.show_dialog))
        object.__setattr__(self, "state", "" if self.state is None else str(self.state))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> AuthorizeOptions:
        """Merge a plain mapping over the defaults, dropping unknown keys."""
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(key) for key in options if key not in known)
        if unknown:
            _LOG.debug("ignoring unknown authorize options: %s", ", ".join(unknown))
        return cls(**{key: value for key, value in options.items() if key in known})


@dataclass(frozen=True)
class TokenGrant:
    """Token endpoint success payload."""

    access_token: str
    expires_in: int
    refresh_token: str = ""

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class TokenError:
    """Token endpoint rejection; ``body`` is the raw response body."""

    body: Any
    status: int | None = None

    def __bool__(self) -> bool:
        return False


TokenResult = TokenGrant | TokenError


class Session:
    """Client credentials and token state for one Spotify application."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        request: Request | None = None,
    ) -> None:
        self._client_id = ""
        self._client_secret = ""
        self._redirect_uri = ""
        self.set_client_id(client_id)
        self.set_client_secret(client_secret)
        self.set_redirect_uri(redirect_uri)

        self._access_token = ""
        self._refresh_token = ""
        self._expires = 0
        self._token_lock = threading.Lock()
        self._request = request or Request()

    def get_authorize_url(
        self,
        options: AuthorizeOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Return the URL the user should be sent to for authorization."""
        if options is None or isinstance(options, Mapping):
            options = AuthorizeOptions.from_mapping(options)
        elif not isinstance(options, AuthorizeOptions):
            raise ValueError(f"unsupported authorize options: {type(options).__name__}")

        parameters = {
            "client_id": self.get_client_id(),
            "redirect_uri": self.get_redirect_uri(),
            "response_type": "code",
            "scope": " ".join(options.scope),
            "show_dialog": "true" if options.show_dialog else "false",
            "state": options.state,
        }
        return f"{self._request.account_url}/authorize/?{urlencode(parameters)}"

    def request_token(self, code: str) -> TokenResult:
        """Exchange an authorization code for an access and refresh token.

        Returns a truthy ``TokenGrant`` and stores the tokens on success, or a
        falsy ``TokenError`` leaving the session untouched.
        """
        parameters = {
            "client_id": self.get_client_id(),
            "client_secret": self.get_client_secret(),
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.get_redirect_uri(),
        }
        response = self._request.account("POST", _TOKEN_PATH, parameters)

        result = _token_result(response)
        if not result:
            _LOG.warning("spotify authorization code exchange rejected status=%s", result.status)
            return result

        with self._token_lock:
            self._access_token = result.access_token
            self._expires = result.expires_in
            self._refresh_token = result.refresh_token
        _LOG.info("spotify access token issued expires_in=%s", result.expires_in)
        return result

    def refresh_token(self) -> TokenResult:
        """Renew the access token using the stored refresh token.

        Only the access token and expiry are updated. The stored refresh token
        is kept even if Spotify sends a new one.
        """
        credentials = f"{self.get_client_id()}:{self.get_client_secret()}".encode("utf-8")
        payload = base64.b64encode(credentials).decode("ascii")

        parameters = {
            "grant_type": "refresh_token",
            "refresh_token": self.get_refresh_token(),
        }
        headers = {"Authorization": f"Basic {payload}"}
        response = self._request.account("POST", _TOKEN_PATH, parameters, headers)

        result = _token_result(response)
        if not result:
            _LOG.warning("spotify token refresh rejected status=%s", result.status)
            return result

        # TODO: store result.refresh_token once Spotify is confirmed to rotate refresh tokens.
        with self._token_lock:
            self._access_token = result.access_token
            self._expires = result.expires_in
        _LOG.info("spotify access token refreshed expires_in=%s", result.expires_in)
        return result

    def get_token_state(self) -> TokenGrant:
        """Snapshot of the stored access token, expiry and refresh token."""
        with self._token_lock:
            return TokenGrant(
                access_token=self._access_token,
                expires_in=self._expires,
                refresh_token=self._refresh_token,
            )

    def get_access_token(self) -> str:
        with self._token_lock:
            return self._access_token

    def get_refresh_token(self) -> str:
        with self._token_lock:
            return self._refresh_token

    def get_expires(self) -> int:
        """Seconds until expiry as reported by the last token response."""
        with self._token_lock:
            return self._expires

    def get_client_id(self) -> str:
        return self._client_id

    def get_client_secret(self) -> str:
        return self._client_secret

    def get_redirect_uri(self) -> str:
        return self._redirect_uri

    def set_client_id(self, client_id: str) -> None:
        self._client_id = client_id

    def set_client_secret(self, client_secret: str) -> None:
        self._client_secret = client_secret

    def set_redirect_uri(self, redirect_uri: str) -> None:
        self._redirect_uri = redirect_uri


def _token_result(response: Mapping[str, Any]) -> TokenResult:
    body = response.get("body")
    status = response.get("status")
    if not isinstance(body, Mapping) or body.get("access_token") is None:
        return TokenError(body=body, status=status)
    try:
        expires_in = int(body.get("expires_in") or 0)
    except (TypeError, ValueError):
        return TokenError(body=body, status=status)
    return TokenGrant(
        access_token=str(body["access_token"]),
        expires_in=expires_in,
        refresh_token=str(body.get("refresh_token") or ""),
    )
