"""Data models and types used across the backend.

Request/response schemas for the HTTP surface are in schemas.py.
Types passed between the validator, the DataForSEO client and the reshaper live here.
"""

from typing import TypedDict


class KeywordQuery(TypedDict):
    """Validated ranked-keywords lookup."""

    domain: str
    location: str
    language: str
    limit: int


class UpstreamTask(TypedDict):
    """Single task posted to the DataForSEO Labs ranked keywords endpoint."""

    target: str
    location_name: str
    language_name: str
    limit: int
    order_by: list[str]


class KeywordRecord(TypedDict):
    """Flattened keyword row returned to clients."""

    keyword: object
    search_volume: object
    competition: object
    cpc: object
    position: object
    url: object
