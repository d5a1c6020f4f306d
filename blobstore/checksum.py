"""Provides SHA-1 fingerprinting helpers, including a pass-through stream stage."""

import hashlib
from typing import AsyncIterable, AsyncIterator


class IncrementalChecksumCalculator:
    """
    Calculate SHA-1 fingerprint incrementally for streaming data.

    Usage:
        calculator = IncrementalChecksumCalculator()
        calculator.update(chunk1)
        calculator.update(chunk2)
        fingerprint = calculator.finalize()
    """

    def __init__(self):
        self._hasher = hashlib.sha1()
        self._finalized = False
        self.size = 0

    def update(self, data: bytes) -> None:
        """
        Update fingerprint and byte count with new data.

        Args:
            data: Bytes to add to the calculation
        """
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)
        self.size += len(data)

    def finalize(self) -> str:
        """
        Finalize the calculation and return the fingerprint.

        Returns:
            40-character lowercase hex digest
        """
        self._finalized = True
        return self._hasher.hexdigest()


class DigestingStream:
    """
    Stream stage that yields every chunk of its source unchanged while
    feeding it to a checksum calculator.

    Usage:
        stage = DigestingStream(source)
        async for chunk in stage:
            sink.write(chunk)
        fingerprint, size = stage.hexdigest(), stage.size
    """

    def __init__(self, source: AsyncIterable[bytes]):
        self._source = source
        self._calculator = IncrementalChecksumCalculator()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._forward()

    async def _forward(self) -> AsyncIterator[bytes]:
        async for chunk in self._source:
            self._calculator.update(chunk)
            yield chunk

    @property
    def size(self) -> int:
        return self._calculator.size

    def hexdigest(self) -> str:
        return self._calculator.finalize()
