"""Tests for the bearer-token gate."""

import pytest

from auth import expected_authorization, verify_bearer_token
from conftest import FakeResponse, make_envelope, make_item
from errors import Unauthorized


class TestVerifyBearerToken:
    def test_exact_match_passes(self):
        verify_bearer_token("Bearer test-key", "test-key")

    @pytest.mark.parametrize(
        "header",
        [
            None,
            "",
            "test-key",
            "bearer test-key",
            "Bearer  test-key",
            "Bearer test-key ",
            " Bearer test-key",
            "Bearer test-ke",
            "Bearer test-keyy",
            "Basic dGVzdDprZXk=",
        ],
    )
    def test_anything_else_rejected(self, header):
        with pytest.raises(Unauthorized):
            verify_bearer_token(header, "test-key")

    def test_expected_header(self):
        assert expected_authorization("abc") == "Bearer abc"


def test_gate_rejects_before_upstream(auth_client, upstream):
    r = auth_client.post("/ranked_keywords", json={"domain": "example.com"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}
    assert upstream.calls == []


def test_gate_runs_before_validation(auth_client, upstream):
    r = auth_client.post("/ranked_keywords", json={}, headers={"Authorization": "Bearer wrong"})
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


@pytest.mark.parametrize("path", ["/", "/health"])
def test_gate_covers_every_route(auth_client, path):
    assert auth_client.get(path).status_code == 401
    assert auth_client.get(path, headers={"Authorization": "Bearer test-key"}).status_code == 200


def test_gate_allows_matching_token(auth_client, upstream):
    upstream.response = FakeResponse(make_envelope([make_item("example")]))
    r = auth_client.post(
        "/ranked_keywords",
        json={"domain": "example.com"},
        headers={"Authorization": "Bearer test-key"},
    )
    assert r.status_code == 200
    assert r.json()["total_keywords"] == 1
    assert len(upstream.calls) == 1


def test_valid_token_still_needs_domain(auth_client, upstream):
    r = auth_client.post("/ranked_keywords", json={}, headers={"Authorization": "Bearer test-key"})
    assert r.status_code == 400
    assert r.json() == {"error": "Domain is required"}


def test_gate_off_without_api_key(client):
    assert client.get("/health").status_code == 200
