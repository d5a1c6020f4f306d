"""File service for business logic."""

import asyncio
from typing import AsyncIterable, Callable, Iterator, List, Optional, Tuple

from blobstore.blob_storage import get_blob_size, read_blob_streaming
from blobstore.ingest import BlobIngestor
from common.exceptions import RecordNotFoundError
from common.logging_config import get_logger
from common.types import CatalogEntry, FileRecord
from fileserver.repositories.file_repository import FileRepository
from fileserver.utils import now_millis

logger = get_logger(__name__)


class FileService:
    def __init__(
        self,
        file_repo: FileRepository,
        ingestor: BlobIngestor,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.file_repo = file_repo
        self.ingestor = ingestor
        self._now_millis = clock or now_millis

    async def upload_file(
        self,
        origin: str,
        file_name: str,
        stream: AsyncIterable[bytes],
    ) -> FileRecord:
        """
        Store an upload and record its metadata.

        The blob is fully written and moved to its final path before the
        record is stamped and upserted, so a failed upload never leaves a
        record behind.

        Args:
            origin: Scheme and host the client used, e.g. "http://host:32109"
            file_name: Decoded name supplied by the client
            stream: Async iterable of body chunks

        Returns:
            The stored FileRecord

        Raises:
            StreamFailureError: If the upload stream fails
            FilesystemFailureError: If the blob cannot be written or moved
        """
        blob = await self.ingestor.spool(file_name, stream)

        record = FileRecord(
            sha1=blob.sha1,
            url=f"{origin}/download/{blob.sha1}",
            name=blob.name,
            path=blob.path,
            size=blob.size,
            time=self._now_millis(),
        )

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.file_repo.upsert, record)

        logger.info(f"Stored file {record.name!r} [sha1={record.sha1}] [size={record.size}]")
        return record

    def get_file_info(self, sha1: str) -> FileRecord:
        record = self.file_repo.get_by_sha1(sha1)
        if record is None:
            raise RecordNotFoundError(f"File {sha1} not found")
        return record

    def delete_file(self, sha1: str) -> None:
        """Drop the record for sha1; deleting an unknown sha1 is a no-op."""
        self.file_repo.delete(sha1)

    def list_catalog(self) -> List[CatalogEntry]:
        return self.file_repo.list_catalog()

    def list_files_by_catalog(self, name: str) -> List[FileRecord]:
        return self.file_repo.list_by_catalog(name)

    def download_file(self, sha1: str) -> Tuple[FileRecord, int, Iterator[bytes]]:
        """
        Look up a file and open its blob for streaming.

        Returns:
            (record, size on disk, iterator over the blob's bytes)

        Raises:
            RecordNotFoundError: If there is no record, or its blob is gone
        """
        record = self.get_file_info(sha1)

        size = get_blob_size(record.path)
        if size is None:
            logger.warning(f"Blob missing on disk [sha1={sha1}] [path={record.path}]")
            raise RecordNotFoundError(f"File {sha1} has no data")

        return record, size, read_blob_streaming(record.path)
