"""Pydantic schemas for API requests and responses."""

from fileserver.schemas.files import (
    FileInfo,
    CatalogItem,
    FileInfoResponse,
    CatalogResponse,
    CatalogFilesResponse
)
from fileserver.schemas.common import (
    ErrorResponse,
    SuccessResponse,
    StatusResponse,
    HealthStatusResponse,
    ReadyResponse
)

__all__ = [
    "FileInfo",
    "CatalogItem",
    "FileInfoResponse",
    "CatalogResponse",
    "CatalogFilesResponse",
    "ErrorResponse",
    "SuccessResponse",
    "StatusResponse",
    "HealthStatusResponse",
    "ReadyResponse"
]
