"""Short code resolution and click recording."""

import logging
from typing import Optional

from ..common.clock import Clock, utc_now
from ..common.logging_config import request_logger
from ..common.url_builder import isoformat_utc
from ..common.validators import has_valid_short_code_length
from ..database.base import URLStoreBase
from ..database.models import ClickEvent
from ..exceptions import InvalidInputError, NotFoundError, ExpiredError, UnavailableError


class RedirectService:
    """Looks up a short code, checks expiry and records the click."""

    def __init__(
        self,
        store: URLStoreBase,
        logger: Optional[logging.Logger] = None,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.logger = logger or logging.getLogger("shortener.service")
        self.clock = clock

    async def resolve(
        self,
        short_code: str,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
        referer: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """Resolve a short code to its long URL.

        A click is appended only once the record is known to be active.
        Failing to record it is logged and does not fail the redirect.

        Raises:
            InvalidInputError: If the code has an impossible length
            NotFoundError: If the code is unknown
            ExpiredError: If the code's validity window has passed
            UnavailableError: If the lookup itself fails
        """
        log = request_logger(self.logger, request_id)

        if not has_valid_short_code_length(short_code):
            log.warning(f"Invalid shortcode format: {short_code!r}")
            raise InvalidInputError("Invalid shortcode format.")

        record = await self.store.get(short_code)
        if record is None:
            log.warning(f"Shortcode not found: {short_code}")
            raise NotFoundError("URL not found.")

        now = self.clock()
        if record.is_expired(now):
            log.warning(
                f"Shortcode expired: {short_code}, expired at: {isoformat_utc(record.expires_at)}"
            )
            raise ExpiredError("URL has expired.")

        click = ClickEvent.from_request_info(now, user_agent=user_agent, ip=ip, referer=referer)
        try:
            recorded = await self.store.append_click(short_code, click)
        except UnavailableError:
            log.exception(f"Could not record click for {short_code}; redirecting anyway")
        else:
            if recorded:
                log.info(f"Click logged for shortcode: {short_code}, total clicks: {record.click_count + 1}")
            else:
                log.warning(f"Click not recorded, record vanished: {short_code}")

        log.info(f"Redirecting {short_code} to: {record.long_url}")
        return record.long_url
