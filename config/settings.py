"""Spotify Web API connection settings."""

from __future__ import annotations

import os

# Base URL for the authorize and token endpoints.
SPOTIFY_ACCOUNT_URL = os.getenv("SPOTIFY_ACCOUNT_URL", "https://accounts.spotify.com")

# Base URL for Web API resource calls.
SPOTIFY_API_URL = os.getenv("SPOTIFY_API_URL", "https://api.spotify.com")

# Per-request timeout handed to requests.
SPOTIFY_TIMEOUT_SECONDS = float(os.getenv("SPOTIFY_TIMEOUT_SECONDS", "20"))
