"""Utility helper functions for the file server."""

import mimetypes
import re
import time
from datetime import datetime, timezone
from typing import Tuple
from urllib.parse import quote, unquote

from common.exceptions import InvalidCatalogError

CATALOG_PATTERN = re.compile(r"^\d{4}(0[1-9]|1[0-2])$")

# Characters encodeURIComponent leaves alone besides ASCII alphanumerics.
DISPOSITION_SAFE_CHARS = "-_.!~*'()"


def now_millis() -> int:
    """
    Get current time in epoch milliseconds.

    Returns:
        Current timestamp as integer milliseconds
    """
    return int(time.time() * 1000)


def decode_filename_header(value: str) -> str:
    """
    Decode the URL-encoded x-filename header.

    Args:
        value: Raw header value

    Returns:
        Decoded filename
    """
    return unquote(value)


def encode_disposition_filename(name: str) -> str:
    """
    Percent-encode a filename for the Content-Disposition header.

    Args:
        name: Stored display name

    Returns:
        Header-safe ASCII string
    """
    return quote(name, safe=DISPOSITION_SAFE_CHARS)


def guess_media_type(name: str) -> str:
    """
    Guess the Content-Type of a file from its name.

    Args:
        name: Filename with extension

    Returns:
        MIME type, application/octet-stream when unknown
    """
    guess, _ = mimetypes.guess_type(name)
    return guess or "application/octet-stream"


def catalog_range_millis(name: str) -> Tuple[int, int]:
    """
    Convert a YYYYMM catalog name into a half-open UTC time range.

    Args:
        name: Month bucket, e.g. "202503"

    Returns:
        (start, end) in epoch milliseconds, end exclusive

    Raises:
        InvalidCatalogError: If name is not a valid YYYYMM month
    """
    if not CATALOG_PATTERN.match(name):
        raise InvalidCatalogError(f"Invalid catalog name: {name}")

    year, month = int(name[:4]), int(name[4:])
    try:
        start = datetime(year, month, 1, tzinfo=timezone.utc)
        if month == 12:
            end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        else:
            end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    except ValueError as e:
        raise InvalidCatalogError(f"Invalid catalog name: {name}") from e

    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)
