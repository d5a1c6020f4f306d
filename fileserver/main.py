"""Entry point for the file server."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blobstore.ingest import BlobIngestor
from blobstore.paths import PathBuilder
from blobstore.tmp_sweeper import TmpFileSweeper
from common.exceptions import (
    FileServerError,
    FilesystemFailureError,
    InvalidCatalogError,
    RecordNotFoundError,
    StreamFailureError,
    UninitializedStoreError
)
from common.logging_config import is_release_mode, setup_logging
from fileserver.config import (
    FILE_SERVER_HOST,
    FILE_SERVER_PORT,
    IGNORED_LOG_PATHS,
    ROOT_DIR_DATA,
    TMP_MAX_AGE_SECONDS,
    TMP_SWEEP_INTERVAL_SECONDS
)
from fileserver.database import Database
from fileserver.repositories.file_repository import FileRepository
from fileserver.routes import catalog_router, file_router, health_router
from fileserver.schemas.common import ErrorResponse
from fileserver.services.file_service import FileService

logger = setup_logging('fileserver')
setup_logging('blobstore')

def _error_response(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(msg=msg).model_dump())


def create_app(
    data_root: Optional[Union[str, Path]] = None,
    sweep_interval_seconds: float = TMP_SWEEP_INTERVAL_SECONDS,
    tmp_max_age_seconds: float = TMP_MAX_AGE_SECONDS
) -> FastAPI:
    """
    Build the file server application.

    Args:
        data_root: Directory holding blobs and data.db. Defaults to ROOT_DIR_DATA
        sweep_interval_seconds: Spool sweeper interval, 0 disables the sweeper
        tmp_max_age_seconds: Age after which a spool file is swept

    Returns:
        FastAPI application; the database is initialized on startup
    """
    root = Path(data_root if data_root is not None else ROOT_DIR_DATA)

    database = Database(root)
    file_service = FileService(
        file_repo=FileRepository(database),
        ingestor=BlobIngestor(PathBuilder(root)),
    )
    sweeper = None
    if sweep_interval_seconds > 0:
        sweeper = TmpFileSweeper(root, sweep_interval_seconds, tmp_max_age_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("File server starting up...")
        database.init_database()
        logger.info(f"ROOT_DIR_DATA {root.absolute()}")

        if sweeper:
            await sweeper.start()

        yield

        logger.info("File server shutting down...")
        if sweeper:
            await sweeper.stop()

    app = FastAPI(
        title="Content-addressed File Server",
        description="Stores uploads under their SHA-1 and indexes them by upload month",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.database = database
    app.state.file_service = file_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "GET", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "x-filename"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and tag them with a request id.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        log_request = request.url.path not in IGNORED_LOG_PATHS
        client = request.client.host if request.client else None

        start_time = time.time()

        if log_request:
            logger.info(f"{client} {request.method} {request.url.path} [request_id={request_id}]")

        response = await call_next(request)

        duration = time.time() - start_time

        if log_request:
            logger.info(
                f"Request completed: {request.method} {request.url.path} "
                f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
            )

        response.headers["X-Request-ID"] = request_id

        return response

    @app.exception_handler(RecordNotFoundError)
    async def record_not_found_handler(request: Request, exc: RecordNotFoundError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"File not found error: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _error_response(status.HTTP_404_NOT_FOUND, "File not found")

    @app.exception_handler(InvalidCatalogError)
    async def invalid_catalog_handler(request: Request, exc: InvalidCatalogError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Invalid catalog error: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StreamFailureError)
    async def stream_failure_handler(request: Request, exc: StreamFailureError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Upload stream failed: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(FilesystemFailureError)
    async def filesystem_failure_handler(request: Request, exc: FilesystemFailureError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Filesystem error: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(UninitializedStoreError)
    async def uninitialized_store_handler(request: Request, exc: UninitializedStoreError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.critical(
            f"Index used before initialization: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(FileServerError)
    async def file_server_error_handler(request: Request, exc: FileServerError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"File server error: {exc} [request_id={request_id}] path={request.url.path}",
            exc_info=exc
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    app.include_router(health_router)
    app.include_router(file_router)
    app.include_router(catalog_router)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    logger.info(f"service start at {FILE_SERVER_PORT}")
    uvicorn.run(
        "fileserver.main:app",
        host=FILE_SERVER_HOST,
        port=FILE_SERVER_PORT,
        reload=not is_release_mode()
    )


if __name__ == "__main__":
    main()
