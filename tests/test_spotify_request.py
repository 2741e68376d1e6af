from __future__ import annotations

from typing import Any

import pytest
import requests

from spotify_web_api.errors import SpotifyRequestError
from spotify_web_api.request import Request


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.headers = {"Content-Type": "application/json"}
        if text is None:
            text = "" if payload is None else "json"
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _FakeHttpSession:
    def __init__(self, response: Any) -> None:
        self.response = response
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _request(response: Any) -> tuple[Request, _FakeHttpSession]:
    http = _FakeHttpSession(response)
    request = Request(
        account_url="https://accounts.example.test/",
        api_url="https://api.example.test",
        timeout=5,
        session=http,
    )
    return request, http


def test_account_post_sends_form_body() -> None:
    request, http = _request(_FakeResponse(200, {"access_token": "A", "expires_in": 3600}))

    response = request.account(
        "post",
        "/api/token",
        {"grant_type": "refresh_token", "refresh_token": "R"},
        {"Authorization": "Basic abc"},
    )

    assert response["status"] == 200
    assert response["body"] == {"access_token": "A", "expires_in": 3600}
    assert response["url"] == "https://accounts.example.test/api/token"
    method, url, kwargs = http.calls[0]
    assert method == "POST"
    assert url == "https://accounts.example.test/api/token"
    assert kwargs["data"] == {"grant_type": "refresh_token", "refresh_token": "R"}
    assert kwargs["headers"] == {"Authorization": "Basic abc"}
    assert kwargs["timeout"] == 5.0
    assert "params" not in kwargs


def test_api_get_sends_query_parameters() -> None:
    request, http = _request(_FakeResponse(200, {"id": "me"}))

    response = request.api("GET", "/v1/me", {"market": "SE"}, {"Authorization": "Bearer A"})

    assert response["body"] == {"id": "me"}
    method, url, kwargs = http.calls[0]
    assert (method, url) == ("GET", "https://api.example.test/v1/me")
    assert kwargs["params"] == {"market": "SE"}
    assert "data" not in kwargs


def test_json_error_body_is_returned_not_raised() -> None:
    request, _http = _request(_FakeResponse(400, {"error": "invalid_grant"}))

    response = request.account("POST", "/api/token", {"code": "bad"})

    assert response["status"] == 400
    assert response["body"] == {"error": "invalid_grant"}


def test_unparseable_error_response_raises() -> None:
    request, _http = _request(_FakeResponse(502, None, text="<html>Bad Gateway</html>"))

    with pytest.raises(SpotifyRequestError) as excinfo:
        request.account("POST", "/api/token")

    assert excinfo.value.status == 502
    assert "Bad Gateway" in str(excinfo.value)


def test_empty_success_body_is_empty_mapping() -> None:
    request, _http = _request(_FakeResponse(204))

    response = request.api("DELETE", "/v1/me/following", {"ids": "x"})

    assert response["status"] == 204
    assert response["body"] == {}


def test_transport_error_propagates() -> None:
    request, _http = _request(requests.Timeout("timed out"))

    with pytest.raises(requests.Timeout):
        request.account("POST", "/api/token")


def test_defaults_come_from_settings(monkeypatch) -> None:
    monkeypatch.setattr("spotify_web_api.request.SPOTIFY_ACCOUNT_URL", "https://accounts.local")
    monkeypatch.setattr("spotify_web_api.request.SPOTIFY_TIMEOUT_SECONDS", 7.0)

    request = Request(session=_FakeHttpSession(None))

    assert request.account_url == "https://accounts.local"
    assert request.timeout == 7.0
