"""
Pytest fixtures for the keyword lookup proxy.

The outbound DataForSEO call is replaced by a recorder so no test reaches the network.
"""

from __future__ import annotations

import pytest
import requests

CONFIG_VARS = (
    "DATAFORSEO_LOGIN",
    "DATAFORSEO_PASSWORD",
    "PORT",
    "API_KEY",
    "DATAFORSEO_ENDPOINT",
    "LOG_LEVEL",
)


class FakeResponse:
    """Stand-in for requests.Response with a fixed status and body."""

    def __init__(self, body=None, status_code=200, invalid_json=False):
        self._body = body
        self.status_code = status_code
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error for url")

    def json(self):
        if self._invalid_json:
            raise requests.JSONDecodeError("Expecting value", "<html>", 0)
        return self._body


class UpstreamRecorder:
    """Replaces requests.post; records calls and replays a canned outcome."""

    def __init__(self):
        self.calls = []
        self.response = FakeResponse({"tasks": [{"result": []}]})
        self.error = None

    def __call__(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def make_envelope(items):
    return {"tasks": [{"status_code": 20000, "result": [{"target": "example.com", "items": items}]}]}


def make_item(keyword, volume=100, competition=0.5, cpc=1.25, position=1, url="https://example.com/"):
    return {
        "keyword_data": {
            "keyword": keyword,
            "keyword_info": {
                "search_volume": volume,
                "competition": competition,
                "cpc": cpc,
            },
        },
        "ranked_serp_element": {
            "serp_item": {
                "rank_absolute": position,
                "url": url,
            }
        },
    }


@pytest.fixture
def clean_env(monkeypatch):
    """Unset config variables; restored after the test."""
    for name in CONFIG_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def upstream(monkeypatch):
    import dataforseo

    recorder = UpstreamRecorder()
    monkeypatch.setattr(dataforseo.requests, "post", recorder)
    return recorder


@pytest.fixture
def settings():
    from config import Settings

    return Settings(
        dataforseo_login="login@example.com",
        dataforseo_password="secret",
        port=3000,
        endpoint="https://api.dataforseo.test/v3/dataforseo_labs/google/ranked_keywords/live",
    )


@pytest.fixture
def client(settings, upstream):
    """FastAPI TestClient without the bearer gate."""
    from fastapi.testclient import TestClient

    from main import create_app

    return TestClient(create_app(settings))


@pytest.fixture
def auth_client(settings, upstream):
    """FastAPI TestClient with API_KEY=test-key."""
    from fastapi.testclient import TestClient

    from main import create_app

    return TestClient(create_app(settings.model_copy(update={"api_key": "test-key"})))
