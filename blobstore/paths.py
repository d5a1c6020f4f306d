"""Maps (month bucket, sha1 or tmp, filename) to a location under the data root."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

from blobstore.identifiers import new_id
from blobstore.sanitizer import clean_filename
from common.constants import BUCKET_FORMAT, TMP_BUCKET
from common.exceptions import FilesystemFailureError
from common.logging_config import get_logger

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PathBuilder:
    """
    Builds blob paths of the form ``<root>/<YYYYMM>/<bucket_key>/<name>``.

    The month segment always comes from the wall clock at build time, in UTC.
    """

    def __init__(self, data_root: Union[str, Path], clock: Optional[Clock] = None):
        self.data_root = Path(data_root).absolute()
        self._clock = clock or utc_now

    def current_bucket(self) -> str:
        """Month bucket (YYYYMM) for the current time."""
        return self._clock().strftime(BUCKET_FORMAT)

    def build_path(self, bucket_key: str, filename: str) -> Path:
        """
        Build the path for a file and make sure its directory exists.

        Args:
            bucket_key: sha1 of the content, or the tmp bucket for spool files
            filename: Name of the file inside the bucket directory

        Returns:
            Absolute path of the file

        Raises:
            FilesystemFailureError: If the directory cannot be created
        """
        directory = self.data_root / self.current_bucket() / bucket_key
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {directory}: {e}")
            raise FilesystemFailureError(f"Cannot create directory {directory}: {e}") from e
        return directory / clean_filename(filename)

    def tmp_path(self) -> Path:
        """Fresh, collision-free path for a spool file."""
        return self.build_path(TMP_BUCKET, new_id())
