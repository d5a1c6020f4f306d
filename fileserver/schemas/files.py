"""Pydantic schemas for file and catalog endpoints."""

from typing import List

from pydantic import BaseModel

from common.types import CatalogEntry, FileRecord


class FileInfo(BaseModel):
    """Metadata of one stored file."""
    sha1: str
    url: str
    name: str
    path: str
    size: int
    time: int

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileInfo":
        return cls(**record.to_dict())


class CatalogItem(BaseModel):
    """Number of files uploaded in one YYYYMM month."""
    name: str
    count: int

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "CatalogItem":
        return cls(name=entry.name, count=entry.count)


class FileInfoResponse(BaseModel):
    """Response model for /info."""
    code: int = 0
    msg: str = "success"
    data: FileInfo


class CatalogResponse(BaseModel):
    """Response model for /catalog."""
    code: int = 0
    msg: str = "success"
    data: List[CatalogItem]


class CatalogFilesResponse(BaseModel):
    """Response model for /catalog/{name}."""
    code: int = 0
    msg: str = "success"
    data: List[FileInfo]
