"""
Pytest configuration and shared fixtures for codex-usage tests.

- Isolated $HOME with no credential environment variables
- Keychain lookups disabled unless a test opts in
- A fake requests session for the usage endpoint
"""

import json
import os
import sys

import pytest
import requests

# Ensure project root is in path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Empty home directory with credential env vars cleared."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("CODEX_ACCESS_TOKEN", "CODEX_ACCOUNT_ID", "OPENAI_API_KEY", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("codex_usage.auth.shutil.which", lambda name: None)
    return tmp_path


@pytest.fixture
def write_auth(home):
    """Write an auth.json under the fake home; returns its path."""

    def _write(content, relpath=".codex/auth.json"):
        path = home / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            content = json.dumps(content)
        path.write_text(content)
        return path

    return _write


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Records GET calls and replays a canned response or exception."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sample_payload():
    return {
        "plan_type": "plus",
        "rate_limit": {
            "primary_window": {
                "used_percent": 35.0,
                "limit_window_seconds": 18000,
                "reset_after_seconds": 11520,
                "reset_at": 1760000000,
            },
            "secondary_window": {
                "used_percent": 14.0,
                "limit_window_seconds": 604800,
                "reset_after_seconds": 352800,
                "reset_at": 1760340000,
            },
            "limit_reached": False,
        },
    }


@pytest.fixture
def fake_session():
    def _make(status_code=200, payload=None, text=None, error=None):
        response = FakeResponse(status_code, payload, text)
        return FakeSession(response=response, error=error)

    return _make


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
