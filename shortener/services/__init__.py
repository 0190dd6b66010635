"""Business logic services for URL shortener."""

from .shortcode_service import ShortcodeService, CreatedShortUrl
from .redirect_service import RedirectService
from .stats_service import StatsService, StatsPage, StatsQuery

__all__ = [
    "ShortcodeService",
    "CreatedShortUrl",
    "RedirectService",
    "StatsService",
    "StatsPage",
    "StatsQuery",
]
