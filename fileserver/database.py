"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

from common.constants import DATABASE_FILENAME
from common.exceptions import UninitializedStoreError
from common.logging_config import get_logger

logger = get_logger(__name__)


class Database:
    """
    SQLite database holding the file index, stored as ``data.db`` in the
    data root.

    init_database() must run before any connection is handed out.
    """

    def __init__(self, data_root: Union[str, Path]):
        self.data_root = Path(data_root)
        self.path = self.data_root / DATABASE_FILENAME
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.path), timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def init_database(self) -> None:
        """
        Create the data root, then the tables and indexes if they don't exist.
        """
        self.data_root.mkdir(parents=True, exist_ok=True)

        conn = self._connect()
        try:
            cursor = conn.cursor()

            cursor.execute("PRAGMA journal_mode=WAL")

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS fileinfo (
                    sha1 TEXT NOT NULL PRIMARY KEY,
                    url TEXT,
                    name TEXT,
                    path TEXT,
                    size INTEGER,
                    time INTEGER
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS fileinfo_time_idx ON fileinfo(time)
            """)

            conn.commit()
        finally:
            conn.close()

        self._initialized = True
        logger.info(f"Database initialized at {self.path}")

    @contextmanager
    def get_db_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Raises:
            UninitializedStoreError: If init_database() has not completed
        """
        if not self._initialized:
            raise UninitializedStoreError("Database is not initialized")

        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()
