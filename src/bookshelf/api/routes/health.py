"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from bookshelf.core.books.session import LibrarySession, get_library_session

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(
    session: Annotated[LibrarySession, Depends(get_library_session)],
) -> dict:
    """Readiness check - reports whether the initial load has settled."""
    return {
        "status": "loading" if session.loading else "ready",
        "books_api_configured": session.remote.configured,
        "books": len(session.store),
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - verifies service is running."""
    return {"status": "alive"}
