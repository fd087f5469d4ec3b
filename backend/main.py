"""
ChatLedger - Main Application Entry Point

Persists assistant chat sessions and each user's chat index.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatledger import __version__
from chatledger.core.config import get_settings
from chatledger.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting ChatLedger in {settings.ENVIRONMENT} mode...")

    from chatledger.infrastructure.local.database import dispose_engine, init_db

    await init_db()

    # Start background scheduler for periodic jobs
    from chatledger.services.background_scheduler import (
        start_background_scheduler,
        stop_background_scheduler,
    )

    await start_background_scheduler()

    yield

    # Shutdown
    logger.info("Shutting down ChatLedger...")
    await stop_background_scheduler()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="ChatLedger",
        description="Chat history and per-user chat index backend",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request_handler(request: Request, exc: RequestValidationError):
        """Missing or mistyped request fields are caller errors (400)."""
        logger.info(f"Rejected invalid request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request"},
        )

    # Include routers
    from chatledger.api import chats, upload

    app.include_router(upload.router, prefix="/api", tags=["upload"])
    app.include_router(chats.router, prefix="/api", tags=["chats"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": __version__,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
