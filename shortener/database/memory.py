"""In-process URL store, used for local development and tests."""

import copy
import logging
from typing import Dict, List, Optional

from .base import URLStoreBase, SORT_FIELDS, DEFAULT_SORT_FIELD
from .models import ShortUrlRecord, ClickEvent
from ..exceptions import ConflictError


class InMemoryURLStore(URLStoreBase):
    """Dictionary-backed store.

    Operations never await between reading and writing the dictionary, so
    each one is atomic on a single event loop.
    """

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger("shortener.db")
        self._records: Dict[str, ShortUrlRecord] = {}
        self._order: List[str] = []

    async def insert(self, record: ShortUrlRecord) -> None:
        if record.short_code in self._records:
            raise ConflictError(f"Short code '{record.short_code}' already exists")
        self._records[record.short_code] = copy.deepcopy(record)
        self._order.append(record.short_code)
        self.logger.debug(f"Stored record {record.short_code}")

    async def get(self, short_code: str) -> Optional[ShortUrlRecord]:
        record = self._records.get(short_code)
        return copy.deepcopy(record) if record else None

    async def append_click(self, short_code: str, click: ClickEvent) -> bool:
        record = self._records.get(short_code)
        if record is None:
            return False
        record.clicks.append(click)
        return True

    async def list_records(
        self,
        limit: int,
        offset: int = 0,
        sort_by: str = DEFAULT_SORT_FIELD,
        descending: bool = True,
    ) -> List[ShortUrlRecord]:
        attribute = SORT_FIELDS.get(sort_by, SORT_FIELDS[DEFAULT_SORT_FIELD])
        # Insertion order breaks ties, like the natural order of a collection
        position = {code: index for index, code in enumerate(self._order)}
        records = sorted(
            self._records.values(),
            key=lambda r: (getattr(r, attribute), position[r.short_code]),
            reverse=descending,
        )
        return [copy.deepcopy(r) for r in records[offset:offset + limit]]

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.logger.debug("In-memory store closed")
