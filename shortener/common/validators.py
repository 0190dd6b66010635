"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Any, Optional, Tuple


SHORT_CODE_MIN_LENGTH = 3
SHORT_CODE_MAX_LENGTH = 20
MAX_URL_LENGTH = 2048

_SHORT_CODE_RE = re.compile(r"[A-Za-z0-9_-]+")
_DIGITS_RE = re.compile(r"[0-9]+")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required."

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)."

    try:
        result = urlparse(url)
    except ValueError:
        return False, "Invalid URL format."

    if result.scheme not in ("http", "https") or not result.netloc:
        return False, "Invalid URL format."

    return True, ""


def is_valid_short_code(
    short_code: str,
    min_length: int = SHORT_CODE_MIN_LENGTH,
    max_length: int = SHORT_CODE_MAX_LENGTH,
) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    message = (
        f"Shortcode must be {min_length}-{max_length} characters, "
        "alphanumeric with dashes and underscores only."
    )
    if not isinstance(short_code, str):
        return False, message

    if not min_length <= len(short_code) <= max_length:
        return False, message

    if not _SHORT_CODE_RE.fullmatch(short_code):
        return False, message

    return True, ""


def has_valid_short_code_length(short_code: Optional[str]) -> bool:
    """Cheap format check used before looking a code up."""
    return bool(short_code) and SHORT_CODE_MIN_LENGTH <= len(short_code) <= SHORT_CODE_MAX_LENGTH


def parse_validity(validity: Any, max_minutes: int) -> Tuple[Optional[int], str]:
    """Parse a validity window given in minutes.

    Integers and digit-only strings are accepted. None and the empty
    string mean "not given".

    Returns:
        Tuple of (minutes or None, error_message)
    """
    message = f"Validity must be a positive integer (max {max_minutes} minutes)."

    if validity is None or validity == "":
        return None, ""

    # bool is an int subclass; true/false are not minutes
    if isinstance(validity, bool):
        return None, message

    if isinstance(validity, int):
        minutes = validity
    elif isinstance(validity, str) and _DIGITS_RE.fullmatch(validity):
        minutes = int(validity)
    else:
        return None, message

    if minutes <= 0 or minutes > max_minutes:
        return None, message

    return minutes, ""
