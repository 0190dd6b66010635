"""Redirect route for short codes."""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from shortener.common.headers import get_click_info
from shortener.exceptions import ShortenerError

router = APIRouter()

logger = logging.getLogger("shortener.handler")


@router.get("/{shortcode}", include_in_schema=False)
async def redirect_to_url(request: Request, shortcode: str):
    """Redirect to the original URL, recording the click."""
    service = request.app.state.redirect_service
    request_id = getattr(request.state, "request_id", None)

    click_info = get_click_info(
        dict(request.headers),
        peer=request.client.host if request.client else None,
    )
    logger.info(
        f"[{request_id}] Redirect request for shortcode: {shortcode}, "
        f"IP: {click_info['ip']}, Referer: {click_info['referer'] or 'Direct'}"
    )

    try:
        long_url = await service.resolve(
            shortcode,
            request_id=request_id,
            **click_info,
        )
    except ShortenerError as e:
        # Browser-facing route answers in plain text
        if e.status_code >= 500:
            logger.exception(f"[{request_id}] Redirect failed for {shortcode}")
        return PlainTextResponse(e.client_message, status_code=e.status_code)

    # Temporary redirect so every visit reaches us and is counted
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
