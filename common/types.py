"""Shared data type definitions (FileRecord, CatalogEntry)."""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata for one content-addressed blob.

    sha1 is the digest of the bytes stored at path, url is where the blob can
    be downloaded, name is the sanitized upload name, size the exact byte
    count seen during ingest and time the completion time in epoch millis.
    """
    sha1: str
    url: str
    name: str
    path: str
    size: int
    time: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CatalogEntry:
    """
    Number of records created in one YYYYMM month bucket.
    """
    name: str
    count: int
