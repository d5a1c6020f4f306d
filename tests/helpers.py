"""Helpers shared by test modules."""


async def async_chunks(*chunks):
    """Async byte stream yielding the given chunks."""
    for chunk in chunks:
        yield chunk


async def failing_stream(*chunks, error=None):
    """Async byte stream that yields chunks, then raises."""
    for chunk in chunks:
        yield chunk
    raise error or ConnectionResetError("client went away")
