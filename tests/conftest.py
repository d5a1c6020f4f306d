"""Shared pytest fixtures for all tests."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from blobstore.ingest import BlobIngestor
from blobstore.paths import PathBuilder
from fileserver.database import Database
from fileserver.main import create_app
from fileserver.repositories.file_repository import FileRepository
from fileserver.services.file_service import FileService

FIXED_NOW = datetime(2025, 3, 14, 9, 26, 53, tzinfo=timezone.utc)


@pytest.fixture
def data_root(tmp_path):
    """
    Create temporary data root.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to the data root
    """
    root = tmp_path / 'data'
    root.mkdir()
    return root


@pytest.fixture
def database(data_root):
    """
    Initialized database inside the temporary data root.
    """
    db = Database(data_root)
    db.init_database()
    return db


@pytest.fixture
def file_repo(database):
    return FileRepository(database)


@pytest.fixture
def path_builder(data_root):
    """
    PathBuilder whose clock is frozen at FIXED_NOW.
    """
    return PathBuilder(data_root, clock=lambda: FIXED_NOW)


@pytest.fixture
def file_service(file_repo, path_builder):
    return FileService(file_repo=file_repo, ingestor=BlobIngestor(path_builder))


@pytest.fixture
def client(data_root):
    """
    FastAPI test client over a fresh data root, with startup run.
    """
    with TestClient(create_app(data_root)) as test_client:
        yield test_client
