"""Service layer for business logic."""

from fileserver.services.file_service import FileService

__all__ = [
    "FileService",
]
