"""Turns arbitrary upload names into filesystem-legal, byte-bounded names."""

import re

from common.constants import MAX_FILENAME_BYTES, TRUNCATION_MARKER

ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

ENCODING = "utf-8"


def encoded_length(text: str) -> int:
    """
    Length of text in bytes once encoded for the filesystem.

    Args:
        text: Name to measure

    Returns:
        Number of UTF-8 bytes
    """
    return len(text.encode(ENCODING, errors="surrogatepass"))


def _bridge(name: str, half: int) -> str:
    """Join the first and last `half` characters of name with the marker."""
    return name[:half] + TRUNCATION_MARKER + name[len(name) - half:]


def _hard_truncate(name: str, max_bytes: int) -> str:
    keep = max_bytes - len(TRUNCATION_MARKER)
    raw = name.encode(ENCODING, errors="surrogatepass")[:keep]
    return raw.decode(ENCODING, errors="ignore") + TRUNCATION_MARKER


def clean_filename(filename: str, max_bytes: int = MAX_FILENAME_BYTES) -> str:
    """
    Make a user supplied filename safe to store on disk.

    Characters that are illegal on common filesystems are removed. A name whose
    encoded size exceeds max_bytes keeps an equal number of characters from
    both ends joined by ``...``, so that both the stem and the extension stay
    readable. The result of this function is a fixed point of it.

    Args:
        filename: Raw name as sent by the client
        max_bytes: Byte budget of the returned name

    Returns:
        Sanitized filename

    Raises:
        ValueError: If max_bytes cannot hold the truncation marker
    """
    marker_bytes = encoded_length(TRUNCATION_MARKER)
    if max_bytes < marker_bytes:
        raise ValueError(f"max_bytes must be at least {marker_bytes}, got {max_bytes}")

    cleaned = ILLEGAL_CHARS.sub("", filename)

    if encoded_length(cleaned) <= max_bytes:
        return cleaned

    # Encoded size of the bridged name grows with half, so the widest
    # fitting half can be found by bisection.
    low, high = 0, len(cleaned) // 2
    best = None
    while low <= high:
        half = (low + high) // 2
        if encoded_length(_bridge(cleaned, half)) <= max_bytes:
            best = half
            low = half + 1
        else:
            high = half - 1

    if best is not None:
        return _bridge(cleaned, best)

    safe_result = ""
    for half in range(len(cleaned) // 2):
        candidate = _bridge(cleaned, half)
        if encoded_length(candidate) > max_bytes:
            break
        safe_result = candidate

    return safe_result or _hard_truncate(cleaned, max_bytes)
