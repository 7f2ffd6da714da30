"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from bookshelf import __version__
from bookshelf.api.routes import health_router, library_router
from bookshelf.config import get_settings
from bookshelf.core.books.session import get_library_session, set_library_session
from bookshelf.utils.logging import setup_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler: initial load on startup, close on shutdown."""
    setup_logging(debug=settings.debug)
    session = get_library_session()
    await session.start()
    yield
    await session.close()
    set_library_session(None)


app = FastAPI(
    title=settings.app_name,
    description="Book collection kept in sync with a remote REST resource",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")

# Include routers
app.include_router(health_router)
app.include_router(library_router)


@app.get("/")
async def root():
    """API information endpoint."""
    return {
        "service": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
        "health": "/health",
        "library": "/v1/library",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookshelf.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers,
    )
