"""Short URL creation."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.clock import Clock, utc_now
from ..common.logging_config import request_logger
from ..common.url_builder import build_short_url, isoformat_utc
from ..common.validators import is_valid_url, is_valid_short_code, parse_validity
from ..database.base import URLStoreBase
from ..database.models import ShortUrlRecord
from ..exceptions import ConflictError, InvalidInputError, ResourceExhaustedError
from ..shortcode import ShortCodeGenerator


@dataclass
class CreatedShortUrl:
    """Result of a successful creation."""

    short_code: str
    shortlink: str
    expires_at: datetime

    @property
    def expiry(self) -> str:
        return isoformat_utc(self.expires_at)


class ShortcodeService:
    """Validates input, picks a short code and stores the new record."""

    def __init__(
        self,
        store: URLStoreBase,
        base_url: str,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        default_validity_minutes: int = 30,
        max_validity_minutes: int = 43200,
        max_collision_retries: int = 5,
        clock: Clock = utc_now,
    ):
        """Initialize shortcode service.

        Args:
            store: URL store
            base_url: Public base URL used to build shortlinks
            short_code_generator: Optional short code generator
            logger: Optional logger
            default_validity_minutes: Validity when the caller gives none
            max_validity_minutes: Largest accepted validity
            max_collision_retries: Attempts at generating a free code
            clock: Returns the current UTC time
        """
        self.store = store
        self.base_url = base_url
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger("shortener.service")
        self.default_validity_minutes = default_validity_minutes
        self.max_validity_minutes = max_validity_minutes
        self.max_collision_retries = max_collision_retries
        self.clock = clock

    async def create_short_url(
        self,
        long_url: Optional[str],
        validity: Any = None,
        custom_code: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> CreatedShortUrl:
        """Create a new short URL.

        Checks run in a fixed order: URL presence, URL format, validity,
        custom code format, then code availability in the store.

        Args:
            long_url: The URL to shorten
            validity: Validity window in minutes (int or digit string)
            custom_code: Optional custom short code
            request_id: Request id used to prefix log lines

        Returns:
            The created short code, its shortlink and expiry

        Raises:
            InvalidInputError: If validation fails
            ConflictError: If the custom code is taken
            ResourceExhaustedError: If no free code could be generated
            UnavailableError: If the store fails
        """
        log = request_logger(self.logger, request_id)

        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            log.error(f"Validation failed for URL {str(long_url)[:100]!r}: {error}")
            raise InvalidInputError(error)
        log.debug("URL format validation passed.")

        minutes, error = parse_validity(validity, self.max_validity_minutes)
        if error:
            log.error(f"Invalid validity value: {validity!r}")
            raise InvalidInputError(error)
        if minutes is None:
            minutes = self.default_validity_minutes

        if custom_code == "":
            custom_code = None
        if custom_code is not None:
            is_valid, error = is_valid_short_code(custom_code)
            if not is_valid:
                log.error(f"Invalid shortcode format: {custom_code!r}")
                raise InvalidInputError(error)

        created_at = self.clock()
        expires_at = created_at + timedelta(minutes=minutes)
        log.debug(f"Setting expiry to {minutes} minutes: {isoformat_utc(expires_at)}")

        if custom_code is not None:
            short_code = await self._insert_custom(long_url, custom_code, created_at, expires_at, log)
        else:
            short_code = await self._insert_generated(long_url, created_at, expires_at, log)

        result = CreatedShortUrl(
            short_code=short_code,
            shortlink=build_short_url(short_code, self.base_url),
            expires_at=expires_at,
        )
        log.info(f"Created short URL {result.shortlink} -> {long_url}, expires {result.expiry}")
        return result

    async def _insert_custom(self, long_url, short_code, created_at, expires_at, log) -> str:
        record = ShortUrlRecord(
            long_url=long_url,
            short_code=short_code,
            created_at=created_at,
            expires_at=expires_at,
        )
        try:
            await self.store.insert(record)
        except ConflictError:
            log.warning(f"Custom shortcode '{short_code}' already exists.")
            raise ConflictError("Custom shortcode already in use.")
        return short_code

    async def _insert_generated(self, long_url, created_at, expires_at, log) -> str:
        for attempt in range(1, self.max_collision_retries + 1):
            short_code = self.generator.generate_random()
            log.debug(f"Generated shortcode attempt {attempt}: {short_code}")
            record = ShortUrlRecord(
                long_url=long_url,
                short_code=short_code,
                created_at=created_at,
                expires_at=expires_at,
            )
            try:
                await self.store.insert(record)
            except ConflictError:
                log.warning(f"Shortcode collision on attempt {attempt}: {short_code}")
                continue
            return short_code

        log.error(f"Failed to generate unique shortcode after {self.max_collision_retries} attempts.")
        raise ResourceExhaustedError("Unable to generate unique shortcode. Please try again.")
