"""Pydantic schemas for API request/response."""

import logging
import math
import re
from typing import Any

from pydantic import BaseModel, Field, field_validator

from errors import MissingDomain
from models import KeywordQuery

DEFAULT_LOCATION = "United States"
DEFAULT_LANGUAGE = "en"
DEFAULT_LIMIT = 50

LEADING_INT_PATTERN = re.compile(r"^[+-]?\d+")

logger = logging.getLogger(__name__)


def coerce_limit(value: object) -> int:
    """Best-effort integer coercion for ``limit``.

    Integers pass through, floats are truncated toward zero and strings are
    read from their leading digits (``"25abc"`` -> 25). Anything else, booleans
    included, falls back to DEFAULT_LIMIT.
    """
    if value is None:
        return DEFAULT_LIMIT
    if isinstance(value, bool):
        logger.info("LIMIT FALLBACK: boolean limit=%r, using %d.", value, DEFAULT_LIMIT)
        return DEFAULT_LIMIT
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return int(value)
    elif isinstance(value, str):
        match = LEADING_INT_PATTERN.match(value.strip())
        if match:
            try:
                return int(match.group(0))
            except ValueError:
                # Past the interpreter's int digit limit.
                pass

    logger.info("LIMIT FALLBACK: unparseable limit=%r, using %d.", value, DEFAULT_LIMIT)
    return DEFAULT_LIMIT


class RankedKeywordsRequest(BaseModel):
    """Request body for POST /ranked_keywords."""

    domain: str = ""
    location: str = DEFAULT_LOCATION
    language: str = DEFAULT_LANGUAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("domain", mode="before")
    @classmethod
    def normalize_domain(cls, value: object) -> str:
        if not isinstance(value, str):
            return ""
        return value.strip()

    @field_validator("location", mode="before")
    @classmethod
    def normalize_location(cls, value: object) -> str:
        return str(value or "").strip() or DEFAULT_LOCATION

    @field_validator("language", mode="before")
    @classmethod
    def normalize_language(cls, value: object) -> str:
        return str(value or "").strip() or DEFAULT_LANGUAGE

    @field_validator("limit", mode="before")
    @classmethod
    def normalize_limit(cls, value: object) -> int:
        return coerce_limit(value)

    @classmethod
    def from_payload(cls, payload: object) -> "RankedKeywordsRequest":
        """Build a request from a decoded JSON body; non-objects carry no domain."""
        if not isinstance(payload, dict):
            raise MissingDomain()
        return cls.model_validate(payload)

    def to_query(self) -> KeywordQuery:
        if not self.domain:
            raise MissingDomain()
        return {
            "domain": self.domain,
            "location": self.location,
            "language": self.language,
            "limit": self.limit,
        }


class KeywordItem(BaseModel):
    """Single ranked keyword. Values are passed through as DataForSEO sent them."""

    keyword: Any = None
    search_volume: Any = None
    competition: Any = None
    cpc: Any = None
    position: Any = None
    url: Any = None


class RankedKeywordsResponse(BaseModel):
    """Response for POST /ranked_keywords when DataForSEO returned results."""

    domain: str
    location: str
    language: str
    total_keywords: int
    keywords: list[KeywordItem]


class NoRankedKeywordsResponse(BaseModel):
    """Response for POST /ranked_keywords when DataForSEO returned nothing."""

    domain: str
    message: str
    keywords: list[KeywordItem] = Field(default_factory=list)


class StatusResponse(BaseModel):
    """Response for GET /."""

    status: str
    endpoints: list[str]


class HealthResponse(BaseModel):
    """Response for GET /health."""

    status: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Error body for non-200 responses."""

    error: str
    details: str | None = None
