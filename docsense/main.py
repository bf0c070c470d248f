"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from docsense.api.routes.auth import router as auth_router
from docsense.api.routes.documents import router as documents_router
from docsense.api.routes.health import router as health_router
from docsense.api.routes.metrics import router as metrics_router
from docsense.api.routes.usage import router as usage_router
from docsense.config import get_settings
from docsense.errors import DocsenseError
from docsense.services import Services, build_services
from docsense.utils.logging import setup_logging

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


async def handle_docsense_error(request: Request, exc: DocsenseError) -> JSONResponse:
    """Render domain errors as ``{"error", "kind", "suggestion"?}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(services: Services | None = None) -> FastAPI:
    """Create the application.

    Args:
        services: Prebuilt service container (tests). When None the container
            is built from settings at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            yield
            return

        settings = get_settings()
        setup_logging(settings.log_level)
        app.state.services = await build_services(settings)
        logger.info("DocSense API started")
        try:
            yield
        finally:
            await app.state.services.aclose()

    app = FastAPI(title="DocSense API", version=VERSION, lifespan=lifespan)
    if services is not None:
        app.state.services = services

    app.add_exception_handler(DocsenseError, handle_docsense_error)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(auth_router)
    app.include_router(documents_router)
    app.include_router(usage_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "DocSense API", "version": VERSION}

    return app


app = create_app()
