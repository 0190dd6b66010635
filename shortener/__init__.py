"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .services import ShortcodeService, RedirectService, StatsService
from .exceptions import (
    ShortenerError,
    InvalidInputError,
    ConflictError,
    NotFoundError,
    ExpiredError,
    ResourceExhaustedError,
    UnavailableError,
)

__all__ = [
    "ShortCodeGenerator",
    "ShortcodeService",
    "RedirectService",
    "StatsService",
    "ShortenerError",
    "InvalidInputError",
    "ConflictError",
    "NotFoundError",
    "ExpiredError",
    "ResourceExhaustedError",
    "UnavailableError",
]
