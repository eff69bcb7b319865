"""Shared-secret bearer token check for inbound requests."""

import hmac

from errors import Unauthorized


def expected_authorization(api_key: str) -> str:
    return f"Bearer {api_key}"


def verify_bearer_token(authorization: str | None, api_key: str) -> None:
    """Raise Unauthorized unless the header equals ``"Bearer " + api_key`` exactly."""
    if authorization is None:
        raise Unauthorized()

    expected = expected_authorization(api_key).encode("utf-8")
    provided = authorization.encode("utf-8")
    if not hmac.compare_digest(provided, expected):
        raise Unauthorized()
