"""
Utility functions for OCI request signing

This module provides HTTP date formatting, body digest calculation and URL
parsing for the signing string builder.
"""

import time
import base64
import hashlib
from email.utils import formatdate
from typing import Dict, Optional
from urllib.parse import urlsplit

from ..exceptions import AuthError
from .types import SigningErrorCodes, RequestBody


def format_http_date(timestamp: Optional[float] = None) -> str:
    """
    Format a timestamp as an RFC 1123 HTTP date.

    Args:
        timestamp: Unix timestamp (uses current time if None)

    Returns:
        str: Date such as ``Thu, 05 Jan 2014 21:31:40 GMT``
    """
    if timestamp is None:
        timestamp = time.time()
    return formatdate(timestamp, usegmt=True)


def body_to_bytes(body: RequestBody) -> bytes:
    """
    Convert a request body to bytes.

    Args:
        body: String, bytes or None

    Returns:
        bytes: UTF-8 encoded body (empty for None)

    Raises:
        AuthError: If the body is of an unsupported type
    """
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode('utf-8')
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)

    raise AuthError(
        f"Request body must be string, bytes, or None, got {type(body).__name__}",
        SigningErrorCodes.INVALID_BODY,
        {"body_type": type(body).__name__}
    )


def calculate_content_sha256(body: RequestBody) -> str:
    """
    Calculate the x-content-sha256 header value.

    Args:
        body: Request body

    Returns:
        str: Base64 encoded SHA-256 digest of the body
    """
    digest = hashlib.sha256(body_to_bytes(body)).digest()
    return base64.b64encode(digest).decode('ascii')


def parse_url(url: str) -> Dict[str, str]:
    """
    Parse URL to extract components needed for signing.

    Args:
        url: URL string to parse

    Returns:
        dict: Dictionary with parsed URL components:
            - host: host[:port] without user info
            - path: path component ("/" when empty)
            - target: path plus "?query" when present, as sent on the wire

    Raises:
        AuthError: If URL format is invalid
    """
    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise AuthError(
            f"Failed to parse URL: {e}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        ) from e

    if parsed.scheme not in ('http', 'https'):
        raise AuthError(
            f"Unsupported URL scheme: {parsed.scheme or '<none>'}",
            SigningErrorCodes.INVALID_URL,
            {"url": url, "scheme": parsed.scheme}
        )

    host = parsed.netloc.rpartition('@')[2]
    if not host:
        raise AuthError(
            f"Invalid URL format: {url}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        )

    path = parsed.path or "/"
    target = f"{path}?{parsed.query}" if parsed.query else path

    return {
        "host": host,
        "path": path,
        "target": target,
    }


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
