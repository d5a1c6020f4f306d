"""Repository layer for data access."""

from fileserver.repositories.file_repository import FileRepository

__all__ = [
    "FileRepository",
]
