"""API routes package."""

from fileserver.routes.file_routes import router as file_router
from fileserver.routes.catalog_routes import router as catalog_router
from fileserver.routes.health_routes import router as health_router

__all__ = ["file_router", "catalog_router", "health_router"]
