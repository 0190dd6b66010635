"""Listing stored short URLs with aggregate counts."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..common.clock import Clock, utc_now
from ..common.logging_config import request_logger
from ..database.base import URLStoreBase, SORT_FIELDS, DEFAULT_SORT_FIELD
from ..database.models import ShortUrlRecord


@dataclass
class StatsQuery:
    """Normalised listing parameters."""

    limit: int
    offset: int
    sort_by: str
    order: str

    @property
    def descending(self) -> bool:
        return self.order == "desc"


@dataclass
class StatsPage:
    records: List[ShortUrlRecord]
    meta: Dict[str, Any] = field(default_factory=dict)


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class StatsService:
    """Reads pages of records and summarises them."""

    def __init__(
        self,
        store: URLStoreBase,
        logger: Optional[logging.Logger] = None,
        default_limit: int = 50,
        max_limit: int = 1000,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.logger = logger or logging.getLogger("shortener.service")
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.clock = clock

    def parse_query(
        self,
        limit: Any = None,
        offset: Any = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> StatsQuery:
        """Turn raw query parameters into a StatsQuery.

        Bad values fall back to defaults instead of failing, and limits above
        the cap are clamped.
        """
        limit_num = _to_int(limit)
        if limit_num is None or limit_num <= 0:
            limit_num = self.default_limit
        limit_num = min(limit_num, self.max_limit)

        offset_num = _to_int(offset)
        if offset_num is None or offset_num < 0:
            offset_num = 0

        if sort_by not in SORT_FIELDS:
            sort_by = DEFAULT_SORT_FIELD

        return StatsQuery(
            limit=limit_num,
            offset=offset_num,
            sort_by=sort_by,
            order="asc" if order == "asc" else "desc",
        )

    async def list_stats(
        self,
        limit: Any = None,
        offset: Any = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> StatsPage:
        """List a page of records with totals computed against one instant.

        Raises:
            UnavailableError: If the store fails
        """
        log = request_logger(self.logger, request_id)

        requested = _to_int(limit)
        if requested is not None and requested > self.max_limit:
            log.warning(f"Limit too high: {requested}, using {self.max_limit}")

        query = self.parse_query(limit, offset, sort_by, order)
        log.debug(
            f"Parsed parameters - limit: {query.limit}, offset: {query.offset}, "
            f"sort: {query.sort_by} {query.order}"
        )

        records = await self.store.list_records(
            limit=query.limit,
            offset=query.offset,
            sort_by=query.sort_by,
            descending=query.descending,
        )
        log.info(f"Fetched {len(records)} records for stats.")

        now = self.clock()
        active = sum(1 for r in records if r.is_active(now))
        meta = {
            "total": len(records),
            "limit": query.limit,
            "offset": query.offset,
            "sortBy": query.sort_by,
            "order": query.order,
            "totalUrls": len(records),
            "totalClicks": sum(r.click_count for r in records),
            "activeUrls": active,
            "expiredUrls": len(records) - active,
        }
        log.debug(f"Statistics summary: {meta}")

        return StatsPage(records=records, meta=meta)
