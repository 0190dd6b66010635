"""Storage layer for URL shortener."""

import logging
from typing import Optional

from .base import URLStoreBase, SORT_FIELDS, DEFAULT_SORT_FIELD
from .memory import InMemoryURLStore
from .mongo import MongoURLStore
from .models import ShortUrlRecord, ClickEvent


def create_store(database_url: str, logger: Optional[logging.Logger] = None) -> URLStoreBase:
    """Pick a store implementation from the connection string scheme."""
    if database_url.startswith("memory://"):
        return InMemoryURLStore(database_url, logger=logger)
    if database_url.startswith(("mongodb://", "mongodb+srv://")):
        return MongoURLStore(database_url, logger=logger)
    raise ValueError(f"Unsupported database URL: {database_url}")


__all__ = [
    "URLStoreBase",
    "InMemoryURLStore",
    "MongoURLStore",
    "ShortUrlRecord",
    "ClickEvent",
    "SORT_FIELDS",
    "DEFAULT_SORT_FIELD",
    "create_store",
]
