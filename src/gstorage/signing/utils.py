"""
Utility functions for signed URL generation

This module provides helpers for timestamp and duration handling, header name
normalization, content hashing and query string encoding.
"""

import time
import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import List, Tuple, Union
from urllib.parse import urlencode

from ..exceptions import ValidationError

Timestamp = Union[int, float, datetime]
Duration = Union[int, float, timedelta, None]


def to_unix_seconds(value: Timestamp) -> int:
    """
    Convert a point in time to whole Unix seconds.

    Naive datetimes are interpreted as UTC so the result never depends on the
    local timezone.

    Args:
        value: Unix seconds (int or float) or a datetime

    Returns:
        int: Seconds since the epoch, truncated

    Raises:
        TypeError: If value is not a supported type
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expiration must be int, float or datetime, got {type(value).__name__}")

    return int(value)


def duration_seconds(duration: Duration) -> float:
    """
    Convert a validity duration to seconds.

    Args:
        duration: timedelta, number of seconds, or None

    Returns:
        float: Duration in seconds (0 for None)
    """
    if duration is None:
        return 0.0
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def expiration_from_now(duration: Duration, clock=time.time) -> int:
    """
    Compute an absolute expiration a duration from now.

    Args:
        duration: Validity window
        clock: Callable returning the current Unix time

    Returns:
        int: Expiration as whole Unix seconds
    """
    return int(clock() + duration_seconds(duration))


def format_unix_timestamp(timestamp: Timestamp) -> str:
    """Render a point in time as base-10 Unix seconds."""
    return str(to_unix_seconds(timestamp))


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name without surrounding whitespace
    """
    return name.strip().lower()


def calculate_content_md5(content: Union[str, bytes, None]) -> str:
    """
    Calculate the base64 MD5 digest of content, as sent in Content-MD5.

    Args:
        content: Content to hash (string, bytes, or None)

    Returns:
        str: Base64-encoded MD5 digest

    Raises:
        ValidationError: If content is not a string, bytes, or None
    """
    if content is None:
        content = b""
    elif isinstance(content, str):
        content = content.encode('utf-8')
    elif not isinstance(content, (bytes, bytearray)):
        raise ValidationError(
            f"Content must be string, bytes, or None, got {type(content)}",
            "INVALID_CONTENT_TYPE",
            {"content_type": str(type(content))}
        )

    digest = hashlib.md5(content).digest()
    return base64.b64encode(digest).decode('ascii')


def encode_query(pairs: List[Tuple[str, str]]) -> str:
    """
    Form-encode query parameters, preserving their order.

    Args:
        pairs: Ordered (name, value) pairs

    Returns:
        str: Encoded query string without the leading '?'
    """
    return urlencode(pairs)
