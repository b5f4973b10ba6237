"""FastAPI application entry point.

Hosts the view engine: boots it on startup, starts the template watcher and
serves rendered views.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from viewforge.api.antiforgery import router as antiforgery_router
from viewforge.api.schemas import ErrorResponse
from viewforge.api.views import router as views_router
from viewforge.core.config import Settings, get_settings
from viewforge.core.exceptions import TemplateNotFoundError
from viewforge.core.factory import ComponentFactory
from viewforge.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Boots the view engine on startup and stops its watcher on shutdown.
    """
    settings: Settings = app.state.settings
    factory: ComponentFactory = app.state.factory

    # Startup
    logger.info("Starting view engine...")

    try:
        engine = factory.get_view_engine()
    except Exception as e:
        logger.error(f"Failed to boot view engine: {e}", exc_info=True)
        raise

    app.state.view_engine = engine
    app.state.token_registry = factory.token_registry

    if settings.watch_templates:
        engine.start_watching(cache_path=settings.cache_file_path)

    logger.info(f"View engine ready with {len(engine.compiled_views)} compiled views")

    yield

    # Shutdown
    logger.info("Shutting down view engine...")

    try:
        engine.stop_watching()
        logger.info("Template watcher stopped")
    except Exception as e:
        logger.error(f"Error stopping template watcher: {e}", exc_info=True)


def create_app(
    settings: Settings | None = None,
    factory: ComponentFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.
        factory: Optional component factory. If None, one is built from settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="viewforge",
        description="Server-side view templating engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.factory = factory or ComponentFactory(settings)

    app.include_router(views_router)
    logger.info("Registered views router")

    app.include_router(antiforgery_router)
    logger.info("Registered antiforgery router")

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "service": "viewforge",
            "version": "0.1.0",
        }

    @app.exception_handler(TemplateNotFoundError)
    async def template_not_found_handler(request, exc: TemplateNotFoundError):
        """Handle references to unknown templates."""
        logger.warning(f"Template not found: {exc}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(
                detail=str(exc),
                error_code="TEMPLATE_NOT_FOUND",
                extra={"logical_name": exc.logical_name},
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                detail="Internal server error",
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
    )
