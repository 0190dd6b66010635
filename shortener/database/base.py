"""Abstract base class for URL store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List

from .models import ShortUrlRecord, ClickEvent


# Public sort keys -> record attribute names
SORT_FIELDS = {
    "createdAt": "created_at",
    "expiresAt": "expires_at",
    "shortCode": "short_code",
    "longUrl": "long_url",
}
DEFAULT_SORT_FIELD = "createdAt"


class URLStoreBase(ABC):
    """Abstract base class for URL store operations."""

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def insert(self, record: ShortUrlRecord) -> None:
        """Insert a new record.

        Uniqueness of the short code is enforced here, atomically.

        Args:
            record: The record to store

        Raises:
            ConflictError: If the short code already exists
            UnavailableError: If the store fails
        """
        pass

    @abstractmethod
    async def get(self, short_code: str) -> Optional[ShortUrlRecord]:
        """Get the record for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The record if found, None otherwise

        Raises:
            UnavailableError: If the store fails
        """
        pass

    @abstractmethod
    async def append_click(self, short_code: str, click: ClickEvent) -> bool:
        """Append a click to a record's click log.

        Args:
            short_code: The short code that was resolved
            click: The click to append

        Returns:
            True if a record was updated, False if the code is unknown

        Raises:
            UnavailableError: If the store fails
        """
        pass

    @abstractmethod
    async def list_records(
        self,
        limit: int,
        offset: int = 0,
        sort_by: str = DEFAULT_SORT_FIELD,
        descending: bool = True,
    ) -> List[ShortUrlRecord]:
        """List stored records, sorted and paginated.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            sort_by: One of SORT_FIELDS
            descending: Sort direction

        Returns:
            List of records

        Raises:
            UnavailableError: If the store fails
        """
        pass

    async def ensure_indexes(self) -> None:
        """Create indexes the store relies on (no-op by default)."""
        return None

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
