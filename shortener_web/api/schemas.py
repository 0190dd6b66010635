"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List


class CamelModel(BaseModel):
    """Serialises snake_case fields with the camelCase names clients use."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request to shorten a URL.

    Fields are kept loose on purpose: the shortcode service validates them
    in a fixed order and produces the error messages.
    """

    url: Any = Field(None, description="The URL to shorten")
    validity: Any = Field(None, description="Validity in minutes (default 30, max 43200)")
    shortcode: Any = Field(None, description="Optional custom short code (3-20 chars)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity": 30,
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity": "120",
                    "shortcode": "myrepo",
                },
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    shortlink: str = Field(..., description="The complete short URL")
    expiry: str = Field(..., description="ISO-8601 expiry timestamp")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shortlink": "http://localhost:8000/abc1234",
                    "expiry": "2024-01-01T12:30:00.000Z",
                }
            ]
        }
    }


class ClickOut(CamelModel):
    timestamp: str
    source: str


class ShortUrlOut(CamelModel):
    """One stored short URL with its click log."""

    long_url: str
    short_code: str
    created_at: str
    expires_at: str
    clicks: List[ClickOut]


class StatsMeta(CamelModel):
    total: int
    limit: int
    offset: int
    sort_by: str
    order: str
    total_urls: int
    total_clicks: int
    active_urls: int
    expired_urls: int


class StatsResponse(BaseModel):
    """Statistics response."""

    data: List[ShortUrlOut]
    meta: StatsMeta


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Always OK while the process serves requests")
    timestamp: str = Field(..., description="Check timestamp")
    database: str = Field(..., description="Store status")
    remote_logging: str = Field(..., description="enabled or disabled")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
