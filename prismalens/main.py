"""Main FastAPI application entry point."""

import os
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import health, presets, sessions
from .core.registry import SessionRegistry
from .providers import GeminiImageClient, ImageEditProvider
from .utils.config import Config, load_config
from .utils.errors import (
    EmptyPromptError,
    MalformedEncodingError,
    NoOriginalImageError,
    SessionNotFoundError,
    UnknownStyleError,
)
from .utils.logger import get_logger, set_log_level

logger = get_logger(__name__)


def create_app(
    config: Optional[Config] = None,
    provider: Optional[ImageEditProvider] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        config: Preloaded configuration (loaded from env/YAML at startup if omitted)
        provider: Image provider to use instead of a Gemini client
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup and shutdown.

        Creates the provider client on startup and closes it on shutdown.
        """
        logger.info("Application starting up...")

        app_config = config or load_config()
        set_log_level(app_config.log_level)

        owned_client: Optional[GeminiImageClient] = None
        if provider is not None:
            active_provider = provider
        else:
            owned_client = GeminiImageClient(app_config.provider_settings())
            await owned_client.initialize()
            active_provider = owned_client

        app.state.config = app_config
        app.state.provider = active_provider
        app.state.registry = SessionRegistry(active_provider, max_sessions=app_config.max_sessions)

        logger.info(
            "Application startup complete",
            extra={"model": app_config.gemini_model, "environment": app_config.app_env}
        )

        try:
            yield
        finally:
            logger.info("Application shutting down...")
            if owned_client is not None:
                await owned_client.close()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title="PrismaLens",
        description="AI image edits with a before/after comparison slider",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(presets.router, prefix="/presets", tags=["presets"])
    app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(MalformedEncodingError)
    async def malformed_image(request: Request, exc: MalformedEncodingError):
        logger.warning("Rejected upload", extra={"reason": str(exc)})
        return JSONResponse(
            status_code=422,
            content={"detail": MalformedEncodingError.user_message, "reason": str(exc)},
        )

    @app.exception_handler(EmptyPromptError)
    async def empty_prompt(request: Request, exc: EmptyPromptError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(UnknownStyleError)
    async def unknown_style(request: Request, exc: UnknownStyleError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(NoOriginalImageError)
    async def no_original(request: Request, exc: NoOriginalImageError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "prismalens",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))

    uvicorn.run(
        "prismalens.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info",
    )
