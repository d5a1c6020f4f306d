"""Random identifiers for spool files."""

import os
import random

ID_BYTES = 16


def _random_bytes(count: int) -> bytes:
    try:
        return os.urandom(count)
    except NotImplementedError:
        # No OS randomness source on this platform.
        return bytes(random.getrandbits(8) for _ in range(count))


def new_id() -> str:
    """
    Generate a 128-bit random identifier.

    Returns:
        32 lowercase hex characters
    """
    return _random_bytes(ID_BYTES).hex()
