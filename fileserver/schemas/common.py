"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Response model for errors."""
    code: int = 1
    msg: str


class SuccessResponse(BaseModel):
    """Response model for operations without a payload."""
    code: int = 0
    msg: str = "success"


class StatusResponse(BaseModel):
    """Response model for the /status probe."""
    code: str = "success"
    msg: dict = {}


class HealthStatusResponse(BaseModel):
    """Response model for the /front/health-status probe."""
    msg: str = "success"
    code: int = 0
    data: dict = {}


class ReadyResponse(BaseModel):
    """Response model for the /ready probe."""
    ready: bool
    database: str
