"""Read access to stored blobs."""

from pathlib import Path
from typing import Iterator, Optional, Union

from common.constants import READ_PIECE_SIZE


def get_blob_size(path: Union[str, Path]) -> Optional[int]:
    """
    Get size of blob file in bytes.

    Args:
        path: Storage path recorded for the blob

    Returns:
        Size in bytes, or None if the blob doesn't exist
    """
    filepath = Path(path)
    if filepath.is_file():
        return filepath.stat().st_size
    return None


def read_blob_streaming(path: Union[str, Path], piece_size: int = READ_PIECE_SIZE) -> Iterator[bytes]:
    """
    Stream blob data in pieces.

    Args:
        path: Storage path recorded for the blob
        piece_size: Size of each piece in bytes (default 64KB)

    Yields:
        Blob data pieces

    Raises:
        FileNotFoundError: If the blob does not exist
        OSError: If read operation fails
    """
    with open(path, 'rb') as f:
        while True:
            piece = f.read(piece_size)
            if not piece:
                break
            yield piece
