"""Header parsing utilities for URL shortener."""

from typing import Dict, Optional


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    # Convert headers to lowercase for case-insensitive lookup
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def get_client_ip(headers: Dict[str, str], fallback: Optional[str] = None) -> Optional[str]:
    """Client IP: first X-Forwarded-For hop, else the socket peer.

    Args:
        headers: Request headers
        fallback: Peer address of the connection

    Returns:
        Client IP or the fallback
    """
    forwarded_for = extract_forwarded_headers(headers)["forwarded_for"]
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    return fallback


def get_click_info(headers: Dict[str, str], peer: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Collect the request details recorded with a click."""
    headers_lower = {k.lower(): v for k, v in headers.items()}
    return {
        "user_agent": headers_lower.get("user-agent"),
        "ip": get_client_ip(headers, fallback=peer),
        "referer": headers_lower.get("referer") or headers_lower.get("referrer"),
    }
