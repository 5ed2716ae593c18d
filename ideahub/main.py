"""Main FastAPI application for IdeaHub."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__, config
from .backends import Backends
from .web import DashboardSessions, router

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(backends: Optional[Backends] = None) -> FastAPI:
    """Build the application around the given store backends."""
    backends = backends or Backends()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application lifecycle events."""
        # Startup
        logger.info(f"Starting IdeaHub with the {backends.kind} store backend...")
        try:
            backends.init()
        except Exception as e:
            logger.error(f"Failed to initialize store backend: {e}")
            raise

        yield

        # Shutdown
        logger.info("Shutting down IdeaHub...")

    app = FastAPI(
        title="IdeaHub",
        description="Internal ideas management dashboard",
        version=__version__,
        lifespan=lifespan
    )
    app.state.backends = backends
    app.state.sessions = DashboardSessions(backends)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        return JSONResponse(
            status_code=404,
            content={"detail": "Resource not found"}
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc):
        logger.error(f"Internal server error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "ideahub",
            "version": __version__,
            "store_backend": backends.kind,
            "active_sessions": len(app.state.sessions)
        }

    # Include routers
    app.include_router(router)

    if backends.is_local:
        app.mount(
            config.FILES_URL_PREFIX,
            StaticFiles(directory=backends.upload_dir, check_dir=False),
            name="files"
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "ideahub.main:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=config.ENV == "development",
        log_level="info"
    )
