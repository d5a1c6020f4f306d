"""Optional background task that removes stale spool files."""

import asyncio
import time
from pathlib import Path
from typing import Union

from common.constants import TMP_BUCKET
from common.logging_config import get_logger

logger = get_logger(__name__)


def sweep_tmp_files(data_root: Union[str, Path], max_age_seconds: float) -> int:
    """
    Delete spool files older than max_age_seconds.

    Spool files live in ``<root>/<YYYYMM>/tmp/``. Files still being written
    keep a fresh modification time and are left alone.

    Args:
        data_root: Root of the blob tree
        max_age_seconds: Minimum age of a file before it is removed

    Returns:
        Number of files removed
    """
    cutoff = time.time() - max_age_seconds
    removed = 0

    for filepath in Path(data_root).glob(f"*/{TMP_BUCKET}/*"):
        try:
            if not filepath.is_file() or filepath.stat().st_mtime >= cutoff:
                continue
            filepath.unlink()
            removed += 1
        except FileNotFoundError:
            # Renamed into place or swept by someone else meanwhile.
            continue
        except OSError as e:
            logger.warning(f"Failed to remove spool file {filepath}: {e}")

    return removed


class TmpFileSweeper:
    """
    Background task that periodically removes spool files left behind by
    aborted uploads.
    """

    def __init__(self, data_root: Union[str, Path], interval_seconds: float, max_age_seconds: float):
        """
        Initialize sweeper task.

        Args:
            data_root: Root of the blob tree
            interval_seconds: Time between sweeps
            max_age_seconds: Minimum age of a spool file before removal
        """
        self.data_root = Path(data_root)
        self.interval_seconds = interval_seconds
        self.max_age_seconds = max_age_seconds
        self._running = False
        self._task = None

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Spool sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(
            f"Started spool sweeper (interval: {self.interval_seconds}s, max age: {self.max_age_seconds}s)"
        )

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Stopped spool sweeper")

    async def _run(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)

                if not self._running:
                    break

                await self.sweep_cycle()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in spool sweeper: {e}", exc_info=True)

    async def sweep_cycle(self) -> int:
        """Execute one sweep off the event loop."""
        loop = asyncio.get_running_loop()
        removed = await loop.run_in_executor(None, sweep_tmp_files, self.data_root, self.max_age_seconds)
        if removed:
            logger.info(f"Removed {removed} stale spool files")
        return removed
