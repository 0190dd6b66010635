"""Common utilities for URL shortener."""

from .validators import (
    is_valid_url,
    is_valid_short_code,
    has_valid_short_code_length,
    parse_validity,
)
from .headers import extract_forwarded_headers, get_client_ip, get_click_info
from .url_builder import build_short_url, isoformat_utc
from .logging_config import setup_logging, get_logger, request_logger
from .clock import utc_now

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "has_valid_short_code_length",
    "parse_validity",
    "extract_forwarded_headers",
    "get_client_ip",
    "get_click_info",
    "build_short_url",
    "isoformat_utc",
    "setup_logging",
    "get_logger",
    "request_logger",
    "utc_now",
]
