"""Liveness and readiness probe routes."""

import sqlite3

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from fileserver.schemas.common import HealthStatusResponse, ReadyResponse, StatusResponse

router = APIRouter(tags=["Health"])


@router.get("/status", response_model=StatusResponse)
async def status_probe():
    return StatusResponse()


@router.get("/front/health-status", response_model=HealthStatusResponse)
async def front_health_status():
    return HealthStatusResponse()


@router.get("/ready", response_model=ReadyResponse)
def ready_check(request: Request):
    """
    Readiness check endpoint.
    Answers 503 until the index has been initialized and accepts queries.
    """
    database = request.app.state.database

    if not database.initialized:
        db_status = "uninitialized"
    else:
        try:
            with database.get_db_connection() as conn:
                conn.execute("SELECT 1")
            db_status = "ok"
        except sqlite3.Error as e:
            db_status = f"error: {str(e)}"

    ready = db_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content=ReadyResponse(ready=ready, database=db_status).model_dump()
    )
