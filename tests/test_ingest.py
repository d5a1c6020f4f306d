"""Tests for the streaming ingest pipeline and the file service around it."""

import asyncio
import hashlib
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from blobstore.blob_storage import read_blob_streaming
from blobstore.ingest import BlobIngestor
from common.exceptions import FilesystemFailureError, RecordNotFoundError, StreamFailureError
from fileserver.services.file_service import FileService
from tests.helpers import async_chunks, failing_stream

ORIGIN = "http://files.local:32109"


def tmp_files(data_root: Path):
    return sorted(data_root.glob("*/tmp/*"))


class TestBlobIngestor:
    """Test spooling and promotion of blobs."""

    @pytest.mark.asyncio
    async def test_spool_moves_blob_to_content_address(self, path_builder, data_root):
        ingestor = BlobIngestor(path_builder)

        blob = await ingestor.spool("abc.txt", async_chunks(b"12345", b"67890"))

        digest = hashlib.sha1(b"1234567890").hexdigest()
        assert blob.sha1 == digest
        assert blob.size == 10
        assert blob.name == "abc.txt"
        assert Path(blob.path) == data_root.absolute() / "202503" / digest / "abc.txt"
        assert Path(blob.path).read_bytes() == b"1234567890"
        assert tmp_files(data_root) == []

    @pytest.mark.asyncio
    async def test_spool_sanitizes_name(self, path_builder):
        blob = await BlobIngestor(path_builder).spool('re:port?.txt', async_chunks(b"x"))
        assert blob.name == "report.txt"
        assert Path(blob.path).name == "report.txt"

    @pytest.mark.asyncio
    async def test_unusable_name_stored_under_sha1(self, path_builder):
        blob = await BlobIngestor(path_builder).spool("..", async_chunks(b"data"))

        assert blob.name == ".."
        assert Path(blob.path).name == blob.sha1
        assert Path(blob.path).read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_empty_stream(self, path_builder):
        blob = await BlobIngestor(path_builder).spool("empty.bin", async_chunks())

        assert blob.size == 0
        assert blob.sha1 == hashlib.sha1(b"").hexdigest()
        assert Path(blob.path).read_bytes() == b""

    @pytest.mark.asyncio
    async def test_stream_error_raises_and_leaves_spool_file(self, path_builder, data_root):
        with pytest.raises(StreamFailureError):
            await BlobIngestor(path_builder).spool("abc.txt", failing_stream(b"partial"))

        leftovers = tmp_files(data_root)
        assert len(leftovers) == 1
        assert leftovers[0].read_bytes() == b"partial"

    @pytest.mark.asyncio
    async def test_stream_error_kept_when_close_also_fails(self, path_builder):
        spool_file = MagicMock()
        spool_file.close.side_effect = OSError("disk full")

        with patch.object(BlobIngestor, "_open_spool_file", return_value=spool_file):
            with pytest.raises(StreamFailureError):
                await BlobIngestor(path_builder).spool("abc.txt", failing_stream(b"partial"))

        spool_file.write.assert_called_once_with(b"partial")

    @pytest.mark.asyncio
    async def test_close_failure_after_full_stream(self, path_builder):
        spool_file = MagicMock()
        spool_file.close.side_effect = OSError("disk full")

        with patch.object(BlobIngestor, "_open_spool_file", return_value=spool_file):
            with pytest.raises(FilesystemFailureError):
                await BlobIngestor(path_builder).spool("abc.txt", async_chunks(b"complete"))

    @pytest.mark.asyncio
    async def test_rename_failure(self, path_builder, data_root):
        with patch("blobstore.ingest.os.replace", side_effect=OSError("cross-device link")):
            with pytest.raises(FilesystemFailureError):
                await BlobIngestor(path_builder).spool("abc.txt", async_chunks(b"abc"))

        assert len(tmp_files(data_root)) == 1


class TestFileServiceUpload:
    """Test the full ingest: blob plus metadata record."""

    @pytest.mark.asyncio
    async def test_upload_scenario(self, file_service, file_repo):
        record = await file_service.upload_file(ORIGIN, "abc.txt", async_chunks(b"1234567890"))

        digest = hashlib.sha1(b"1234567890").hexdigest()
        assert record.sha1 == digest
        assert record.size == 10
        assert record.url == f"{ORIGIN}/download/{digest}"
        assert record.name == "abc.txt"
        assert file_repo.get_by_sha1(digest) == record

    @pytest.mark.asyncio
    async def test_round_trip(self, file_service):
        payload = bytes(range(256)) * 1024
        pieces = [payload[i:i + 7000] for i in range(0, len(payload), 7000)]

        record = await file_service.upload_file(ORIGIN, "blob.bin", async_chunks(*pieces))
        stored, size, stream = file_service.download_file(record.sha1)

        assert stored == record
        assert size == len(payload)
        assert b"".join(stream) == payload

    @pytest.mark.asyncio
    async def test_fingerprint_independent_of_name(self, file_service):
        first = await file_service.upload_file(ORIGIN, "one.txt", async_chunks(b"same"))
        second = await file_service.upload_file(ORIGIN, "two.txt", async_chunks(b"sa", b"me"))

        assert first.sha1 == second.sha1 == hashlib.sha1(b"same").hexdigest()

    @pytest.mark.asyncio
    async def test_reupload_overwrites_record(self, file_repo, path_builder):
        times = iter([1_000, 2_000])
        service = FileService(file_repo, BlobIngestor(path_builder), clock=lambda: next(times))

        await service.upload_file(ORIGIN, "one.txt", async_chunks(b"same"))
        second = await service.upload_file("http://other", "two.txt", async_chunks(b"same"))

        stored = file_repo.get_by_sha1(second.sha1)
        assert stored.name == "two.txt"
        assert stored.url.startswith("http://other/download/")
        assert stored.time == 2_000
        assert sum(entry.count for entry in file_repo.list_catalog()) == 1

    @pytest.mark.asyncio
    async def test_time_taken_after_rename(self, file_repo, path_builder):
        events = []

        def clock():
            events.append("clock")
            return 42

        ingestor = BlobIngestor(path_builder)
        original_promote = ingestor._promote

        def promote(tmp_path, final_path):
            events.append("rename")
            original_promote(tmp_path, final_path)

        with patch.object(ingestor, "_promote", side_effect=promote):
            service = FileService(file_repo, ingestor, clock=clock)
            record = await service.upload_file(ORIGIN, "t.txt", async_chunks(b"t"))

        assert events == ["rename", "clock"]
        assert record.time == 42

    @pytest.mark.asyncio
    async def test_stream_failure_writes_no_record(self, file_service, file_repo):
        with pytest.raises(StreamFailureError):
            await file_service.upload_file(ORIGIN, "abc.txt", failing_stream(b"1234567890"))

        assert file_repo.list_catalog() == []
        assert file_repo.get_by_sha1(hashlib.sha1(b"1234567890").hexdigest()) is None

    @pytest.mark.asyncio
    async def test_concurrent_uploads(self, file_service, file_repo):
        payloads = [f"payload-{i}".encode() * 100 for i in range(10)]
        payloads += [b"duplicate"] * 5

        records = await asyncio.gather(*(
            file_service.upload_file(ORIGIN, f"f{i}.bin", async_chunks(data[:50], data[50:]))
            for i, data in enumerate(payloads)
        ))

        assert len({record.sha1 for record in records}) == 11
        for record, data in zip(records, payloads):
            assert record.sha1 == hashlib.sha1(data).hexdigest()
            stored = file_repo.get_by_sha1(record.sha1)
            assert b"".join(read_blob_streaming(stored.path)) == data


class TestFileServiceQueries:
    """Test lookups through the service."""

    def test_info_unknown(self, file_service):
        with pytest.raises(RecordNotFoundError):
            file_service.get_file_info("0" * 40)

    @pytest.mark.asyncio
    async def test_delete_keeps_blob(self, file_service):
        record = await file_service.upload_file(ORIGIN, "keep.txt", async_chunks(b"keep"))

        file_service.delete_file(record.sha1)

        with pytest.raises(RecordNotFoundError):
            file_service.get_file_info(record.sha1)
        assert Path(record.path).read_bytes() == b"keep"

    def test_delete_unknown_is_noop(self, file_service):
        file_service.delete_file("f" * 40)

    @pytest.mark.asyncio
    async def test_download_missing_blob(self, file_service):
        record = await file_service.upload_file(ORIGIN, "gone.txt", async_chunks(b"gone"))
        Path(record.path).unlink()

        with pytest.raises(RecordNotFoundError):
            file_service.download_file(record.sha1)
