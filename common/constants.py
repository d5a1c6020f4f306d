"""Project-wide constants (filename budget, spool bucket, stream piece sizes)."""

MAX_FILENAME_BYTES: int = 240
TRUNCATION_MARKER: str = "..."

TMP_BUCKET: str = "tmp"
BUCKET_FORMAT: str = "%Y%m"

DATABASE_FILENAME: str = "data.db"

READ_PIECE_SIZE: int = 64 * 1024  # 64 KiB per piece when streaming a blob out
