"""File repository for database operations."""

from typing import List, Optional

from common.logging_config import get_logger
from common.types import CatalogEntry, FileRecord
from fileserver.database import Database
from fileserver.utils import catalog_range_millis

logger = get_logger(__name__)

FILE_COLUMNS = "sha1, url, name, path, size, time"


def _row_to_record(row) -> FileRecord:
    return FileRecord(
        sha1=row["sha1"],
        url=row["url"],
        name=row["name"],
        path=row["path"],
        size=row["size"],
        time=row["time"],
    )


class FileRepository:
    """
    Index of file records keyed by sha1.

    Every method runs in its own connection and transaction, so calls from
    concurrent uploads never share a transaction.
    """

    def __init__(self, database: Database):
        self.database = database

    def upsert(self, record: FileRecord) -> FileRecord:
        """
        Insert a record, or overwrite every other column of the record with
        the same sha1.
        """
        with self.database.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT INTO fileinfo ({FILE_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(sha1) DO UPDATE SET
                    url = excluded.url,
                    name = excluded.name,
                    path = excluded.path,
                    size = excluded.size,
                    time = excluded.time
                """,
                (record.sha1, record.url, record.name, record.path, record.size, record.time)
            )
            conn.commit()

        logger.debug(f"Upserted file record [sha1={record.sha1}]")
        return record

    def get_by_sha1(self, sha1: str) -> Optional[FileRecord]:
        with self.database.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {FILE_COLUMNS} FROM fileinfo WHERE sha1 = ?",
                (sha1,)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_record(row)

    def delete(self, sha1: str) -> None:
        """
        Remove the record for sha1. The blob on disk is left untouched.
        """
        with self.database.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM fileinfo WHERE sha1 = ?", (sha1,))
            conn.commit()

        logger.info(f"File record deleted [sha1={sha1}]")

    def list_catalog(self) -> List[CatalogEntry]:
        """
        Count records per UTC month bucket, oldest bucket first.
        """
        with self.database.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT strftime('%Y%m', time / 1000, 'unixepoch') AS bucket, COUNT(*) AS count
                FROM fileinfo
                GROUP BY bucket
                ORDER BY bucket
            """)
            rows = cursor.fetchall()

            return [CatalogEntry(name=row["bucket"], count=row["count"]) for row in rows]

    def list_by_catalog(self, name: str) -> List[FileRecord]:
        """
        List the records created during one UTC month, oldest first.

        Raises:
            InvalidCatalogError: If name is not a valid YYYYMM month
        """
        start, end = catalog_range_millis(name)

        with self.database.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {FILE_COLUMNS} FROM fileinfo
                WHERE time >= ? AND time < ?
                ORDER BY time
                """,
                (start, end)
            )
            rows = cursor.fetchall()

            return [_row_to_record(row) for row in rows]

