"""Data models for URL shortener."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ..common.url_builder import isoformat_utc


CLICK_SOURCE_MAX_LENGTH = 500


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes coming back from the store."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class ClickEvent:
    """One resolution of a short code."""

    timestamp: datetime
    source: str

    def __post_init__(self):
        self.timestamp = _as_utc(self.timestamp)
        self.source = (self.source or "")[:CLICK_SOURCE_MAX_LENGTH]

    @classmethod
    def from_request_info(
        cls,
        timestamp: datetime,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
        referer: Optional[str] = None,
    ) -> "ClickEvent":
        """Build a click whose source combines user agent, IP and referer."""
        source = f"{user_agent or 'Unknown'} | IP: {ip or 'unknown'} | Ref: {referer or 'Direct'}"
        return cls(timestamp=timestamp, source=source)

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary."""
        return {"timestamp": isoformat_utc(self.timestamp), "source": self.source}

    def to_document(self) -> dict:
        """Convert to a store document."""
        return {"timestamp": self.timestamp, "source": self.source}

    @classmethod
    def from_document(cls, data: dict) -> "ClickEvent":
        return cls(timestamp=data["timestamp"], source=data.get("source", ""))


@dataclass
class ShortUrlRecord:
    """Represents a short code -> long URL mapping in the store."""

    long_url: str
    short_code: str
    created_at: datetime
    expires_at: datetime
    clicks: List[ClickEvent] = field(default_factory=list)

    def __post_init__(self):
        self.created_at = _as_utc(self.created_at)
        self.expires_at = _as_utc(self.expires_at)
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be later than created_at")

    def is_expired(self, now: datetime) -> bool:
        """A record expires strictly after its expiry timestamp."""
        return _as_utc(now) > self.expires_at

    def is_active(self, now: datetime) -> bool:
        return not self.is_expired(now)

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dictionary with the public field names."""
        return {
            "longUrl": self.long_url,
            "shortCode": self.short_code,
            "createdAt": isoformat_utc(self.created_at),
            "expiresAt": isoformat_utc(self.expires_at),
            "clicks": [click.to_dict() for click in self.clicks],
        }

    def to_document(self) -> dict:
        """Convert to a store document (same layout as the public fields)."""
        return {
            "longUrl": self.long_url,
            "shortCode": self.short_code,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
            "clicks": [click.to_document() for click in self.clicks],
        }

    @classmethod
    def from_document(cls, data: dict) -> "ShortUrlRecord":
        """Create from a store document."""
        return cls(
            long_url=data["longUrl"],
            short_code=data["shortCode"],
            created_at=data["createdAt"],
            expires_at=data["expiresAt"],
            clicks=[ClickEvent.from_document(c) for c in data.get("clicks") or []],
        )
