"""API routes."""

from bookshelf.api.routes.health import router as health_router
from bookshelf.api.routes.library import router as library_router

__all__ = ["health_router", "library_router"]
