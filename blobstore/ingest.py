"""Spools an inbound byte stream to disk and moves it to its content address."""

import asyncio
import contextlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, BinaryIO

from blobstore.checksum import DigestingStream
from blobstore.paths import PathBuilder
from blobstore.sanitizer import clean_filename
from common.exceptions import FilesystemFailureError, StreamFailureError
from common.logging_config import get_logger

logger = get_logger(__name__)

UNUSABLE_NAMES = ("", ".", "..")


@dataclass(frozen=True)
class SpooledBlob:
    """
    A blob that has been written and moved to its final path.
    """
    sha1: str
    name: str
    path: str
    size: int


async def _guard_source(source: AsyncIterable[bytes]) -> AsyncIterator[bytes]:
    """Re-raise any error of the inbound stream as StreamFailureError."""
    try:
        async for chunk in source:
            yield chunk
    except Exception as e:
        raise StreamFailureError(f"Upload stream failed: {e!r}") from e


class BlobIngestor:
    """
    Writes uploads into the content-addressed tree.

    The stream goes to ``<YYYYMM>/tmp/<random id>`` while it is hashed, then
    the spool file is renamed to ``<YYYYMM>/<sha1>/<name>``. Spool files of
    failed uploads stay where they are.
    """

    def __init__(self, paths: PathBuilder):
        self.paths = paths

    async def spool(self, raw_filename: str, stream: AsyncIterable[bytes]) -> SpooledBlob:
        """
        Store an upload under the path derived from its content.

        Args:
            raw_filename: Name supplied by the client
            stream: Async iterable of body chunks

        Returns:
            SpooledBlob describing the stored file

        Raises:
            StreamFailureError: If the stream errors or is cut off
            FilesystemFailureError: If a directory, write or rename fails
        """
        loop = asyncio.get_running_loop()
        name = clean_filename(raw_filename)

        tmp_path = await loop.run_in_executor(None, self.paths.tmp_path)
        stage = DigestingStream(_guard_source(stream))

        out = await loop.run_in_executor(None, self._open_spool_file, tmp_path)
        try:
            async for chunk in stage:
                await loop.run_in_executor(None, self._write_chunk, out, tmp_path, chunk)
            await loop.run_in_executor(None, self._close_spool_file, out, tmp_path)
        except BaseException:
            self._abandon_spool_file(out)
            raise

        sha1 = stage.hexdigest()
        storage_name = sha1 if name in UNUSABLE_NAMES else name
        final_path = await loop.run_in_executor(None, self.paths.build_path, sha1, storage_name)
        await loop.run_in_executor(None, self._promote, tmp_path, final_path)

        logger.debug(f"Spooled {stage.size} bytes to {final_path}")
        return SpooledBlob(sha1=sha1, name=name, path=str(final_path), size=stage.size)

    @staticmethod
    def _open_spool_file(tmp_path: Path) -> BinaryIO:
        try:
            return open(tmp_path, "wb")
        except OSError as e:
            raise FilesystemFailureError(f"Cannot open spool file {tmp_path}: {e}") from e

    @staticmethod
    def _write_chunk(out: BinaryIO, tmp_path: Path, chunk: bytes) -> None:
        try:
            out.write(chunk)
        except OSError as e:
            raise FilesystemFailureError(f"Cannot write spool file {tmp_path}: {e}") from e

    @staticmethod
    def _close_spool_file(out: BinaryIO, tmp_path: Path) -> None:
        try:
            out.close()
        except OSError as e:
            raise FilesystemFailureError(f"Cannot flush spool file {tmp_path}: {e}") from e

    @staticmethod
    def _abandon_spool_file(out: BinaryIO) -> None:
        # Keep the error that aborted the upload.
        with contextlib.suppress(OSError):
            out.close()

    @staticmethod
    def _promote(tmp_path: Path, final_path: Path) -> None:
        # os.replace is atomic within one filesystem and overwrites an
        # existing blob with the same content.
        try:
            os.replace(tmp_path, final_path)
        except OSError as e:
            raise FilesystemFailureError(f"Cannot move {tmp_path} to {final_path}: {e}") from e
