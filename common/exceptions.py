"""Custom exception classes shared by the blob store and the file server."""


class FileServerError(Exception):
    """
    Base exception class for all file server errors.
    """
    pass


class UninitializedStoreError(FileServerError):
    """
    Raised when the metadata index is used before it has been initialized.
    """
    pass


class StreamFailureError(FileServerError):
    """
    Raised when the inbound byte stream errors or closes early during ingest.
    """
    pass


class FilesystemFailureError(FileServerError):
    """
    Raised when creating a directory, writing or renaming a blob fails.
    """
    pass


class RecordNotFoundError(FileServerError):
    """
    Raised when no record exists for the requested sha1.
    """
    pass


class InvalidCatalogError(FileServerError):
    """
    Raised when a catalog name is not a valid YYYYMM month.
    """
    pass
