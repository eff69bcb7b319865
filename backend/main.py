"""Keyword Lookup Proxy – FastAPI app relaying ranked keyword lookups to DataForSEO."""

import logging
from datetime import datetime, timezone
from typing import Any

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import verify_bearer_token
from config import Settings, configure_logging, load_settings
from dataforseo import fetch_ranked_keywords
from errors import MissingDomain, ProxyError, Unauthorized, UpstreamError
from schemas import (
    ErrorResponse,
    HealthResponse,
    NoRankedKeywordsResponse,
    RankedKeywordsRequest,
    RankedKeywordsResponse,
    StatusResponse,
)

SERVICE_STATUS = "DataForSEO MCP Server is running"
ENDPOINTS = ["/ranked_keywords", "/health"]

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def error_response(exc: ProxyError) -> JSONResponse:
    body = ErrorResponse(error=exc.error)
    if isinstance(exc, UpstreamError):
        body.details = exc.message
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/", response_model=StatusResponse)
def root() -> StatusResponse:
    """Service banner with the list of endpoints."""
    return StatusResponse(status=SERVICE_STATUS, endpoints=ENDPOINTS)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Health check for deployment."""
    logger.info("Received new request on /health")
    return HealthResponse(status="OK", timestamp=_utc_timestamp())


@router.post(
    "/ranked_keywords",
    response_model=RankedKeywordsResponse | NoRankedKeywordsResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def ranked_keywords(
    payload: Any = Body(default=None),
    settings: Settings = Depends(get_settings),
) -> RankedKeywordsResponse | NoRankedKeywordsResponse:
    """
    Pipeline: validate body -> build DataForSEO task -> call API -> flatten items.
    """
    logger.info("Received new request on /ranked_keywords")
    query = RankedKeywordsRequest.from_payload(payload).to_query()

    try:
        result = fetch_ranked_keywords(query, settings)
        if "total_keywords" in result:
            return RankedKeywordsResponse(**result)
        return NoRankedKeywordsResponse(**result)
    except UpstreamError as exc:
        logger.error("DATAFORSEO ERROR: %s", exc.message)
        raise
    except Exception as exc:
        logger.exception("DATAFORSEO ERROR: %s", exc)
        raise UpstreamError(str(exc)) from exc


def create_app(settings: Settings) -> FastAPI:
    """Build the app around an explicit Settings object."""
    app = FastAPI(
        title="Keyword Lookup Proxy",
        description="Ranked keywords relay for DataForSEO Labs",
        version="0.1.0",
    )
    app.state.settings = settings

    @app.middleware("http")
    async def require_bearer_token(request: Request, call_next):
        if settings.auth_enabled:
            try:
                verify_bearer_token(request.headers.get("authorization"), settings.api_key)
            except Unauthorized as exc:
                logger.warning("AUTH REJECTED: %s %s", request.method, request.url.path)
                return error_response(exc)
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProxyError)
    async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_unreadable_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Only the JSON body can fail validation; nothing readable means no domain.
        return error_response(MissingDomain())

    @app.on_event("startup")
    def startup() -> None:
        missing_keys = settings.missing_credentials()
        if missing_keys:
            logger.warning("CONFIG: Missing DataForSEO credentials: %s", ", ".join(missing_keys))
        if settings.auth_enabled:
            logger.info("Bearer token required on all endpoints.")
        logger.info("DataForSEO MCP Server running on port %d", settings.port)
        logger.info("Health check: http://localhost:%d/health", settings.port)

    app.include_router(router)
    return app


settings = load_settings()
configure_logging(settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
