"""FastAPI dependencies shared by the route modules."""

from fastapi import Request

from fileserver.services.file_service import FileService


def get_file_service(request: Request) -> FileService:
    """
    Return the FileService wired up by create_app().
    """
    return request.app.state.file_service
