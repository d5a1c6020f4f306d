"""Month catalog API routes."""

from fastapi import APIRouter, Depends

from fileserver.dependencies import get_file_service
from fileserver.schemas.files import (
    CatalogFilesResponse,
    CatalogItem,
    CatalogResponse,
    FileInfo
)
from fileserver.services.file_service import FileService

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("", response_model=CatalogResponse)
def list_catalog(file_service: FileService = Depends(get_file_service)):
    """
    Count uploads per month.

    Returns:
        - data: [{name: "YYYYMM", count: N}, ...] oldest month first
    """
    entries = file_service.list_catalog()
    return CatalogResponse(data=[CatalogItem.from_entry(entry) for entry in entries])


@router.get("/{name}", response_model=CatalogFilesResponse)
def list_files_by_catalog(name: str, file_service: FileService = Depends(get_file_service)):
    """
    List the files uploaded in one month.

    Parameters:
        - name: Month bucket as YYYYMM

    Returns:
        - data: file records of that month, oldest first

    Raises:
        - 400: name is not a valid YYYYMM month
    """
    records = file_service.list_files_by_catalog(name)
    return CatalogFilesResponse(data=[FileInfo.from_record(record) for record in records])
