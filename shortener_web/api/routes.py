"""API routes implementation."""

import logging
from typing import Optional

from fastapi import APIRouter, Request, status

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    StatsResponse,
    StatsMeta,
    ShortUrlOut,
    HealthResponse,
    ErrorResponse,
)
from shortener.common.clock import utc_now
from shortener.common.url_builder import isoformat_utc

router = APIRouter()

logger = logging.getLogger("shortener.handler")


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


@router.post(
    "/shorturls",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Custom shortcode already in use"},
        500: {"model": ErrorResponse, "description": "Shortcode generation exhausted or store failure"},
    },
    summary="Create short URL",
    description="Create a shortened URL with an optional validity (minutes) and custom shortcode.",
)
async def create_short_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.shortcode_service
    request_id = _request_id(request)

    logger.info(
        f"[{request_id}] Received request to shorten URL. "
        f"User-Agent: {request.headers.get('user-agent')}"
    )

    # Errors propagate to the handlers registered in create_app
    result = await service.create_short_url(
        long_url=body.url,
        validity=body.validity,
        custom_code=body.shortcode,
        request_id=request_id,
    )

    return ShortenResponse(shortlink=result.shortlink, expiry=result.expiry)


@router.get(
    "/stats",
    response_model=StatsResponse,
    responses={500: {"model": ErrorResponse, "description": "Store failure"}},
    summary="List statistics",
    description="List stored short URLs with click logs plus totals for the returned page.",
)
async def get_stats(
    request: Request,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    sortBy: Optional[str] = None,
    order: Optional[str] = None,
):
    """List URL statistics."""
    service = request.app.state.stats_service
    request_id = _request_id(request)

    logger.info(f"[{request_id}] Request received for URL statistics. Query params: {dict(request.query_params)}")

    page = await service.list_stats(
        limit=limit,
        offset=offset,
        sort_by=sortBy,
        order=order,
        request_id=request_id,
    )

    return StatsResponse(
        data=[ShortUrlOut(**record.to_dict()) for record in page.records],
        meta=StatsMeta(**page.meta),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Liveness check; also reports store reachability.",
)
async def health_check(request: Request):
    """Health check endpoint."""
    store = request.app.state.store
    log_client = request.app.state.log_client

    database_ok = await store.health_check()

    return HealthResponse(
        status="OK",
        timestamp=isoformat_utc(utc_now()),
        database="healthy" if database_ok else "unhealthy",
        remote_logging="enabled" if log_client.enabled else "disabled",
    )

