"""File operation API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse, StreamingResponse

from fileserver.dependencies import get_file_service
from fileserver.schemas.common import ErrorResponse, SuccessResponse
from fileserver.schemas.files import FileInfo, FileInfoResponse
from fileserver.services.file_service import FileService
from fileserver.utils import decode_filename_header, encode_disposition_filename, guess_media_type

router = APIRouter(tags=["Files"])


@router.put("/upload", response_model=FileInfo)
async def upload_file(
    request: Request,
    x_filename: Optional[str] = Header(None),
    file_service: FileService = Depends(get_file_service)
):
    """
    Upload a file as the raw request body.

    Parameters:
        - x-filename header: URL-encoded original filename (required)
        - body: file content

    Returns:
        - sha1, url, name, path, size, time of the stored file

    Raises:
        - 400: Missing x-filename header
        - 500: Upload stream or filesystem failure
    """
    if x_filename is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(msg="Missing x-filename header").model_dump()
        )

    origin = f"{request.url.scheme}://{request.url.netloc}"
    record = await file_service.upload_file(
        origin=origin,
        file_name=decode_filename_header(x_filename),
        stream=request.stream(),
    )

    return FileInfo.from_record(record)


@router.get("/download/{sha1}")
def download_file(sha1: str, file_service: FileService = Depends(get_file_service)):
    """
    Download a file by sha1.

    Returns:
        - StreamingResponse with file data

    Raises:
        - 404: File not found
    """
    record, size, stream_generator = file_service.download_file(sha1)

    return StreamingResponse(
        stream_generator,
        media_type=guess_media_type(record.name),
        headers={
            "Content-Disposition": f'attachment; filename="{encode_disposition_filename(record.name)}"',
            "Content-Length": str(size),
        }
    )


@router.get("/info/{sha1}", response_model=FileInfoResponse)
def file_info(sha1: str, file_service: FileService = Depends(get_file_service)):
    """
    Get metadata of a file by sha1.

    Raises:
        - 404: File not found
    """
    record = file_service.get_file_info(sha1)
    return FileInfoResponse(data=FileInfo.from_record(record))


@router.delete("/delete/{sha1}", response_model=SuccessResponse)
def delete_file(sha1: str, file_service: FileService = Depends(get_file_service)):
    """
    Delete the metadata of a file. The stored blob stays on disk.
    """
    file_service.delete_file(sha1)
    return SuccessResponse()
