"""FastAPI dependencies for dependency injection.

Provides the view engine and token registry stored on the application
state during startup.
"""

import logging

from fastapi import HTTPException, Request, status

from viewforge.core.tokens import TokenRegistry
from viewforge.engine.view_engine import ViewEngine

logger = logging.getLogger(__name__)


def get_view_engine(request: Request) -> ViewEngine:
    """Dependency for getting the running view engine.

    Args:
        request: The incoming request.

    Returns:
        The view engine booted during application startup.

    Raises:
        HTTPException: If the engine is not available.
    """
    engine = getattr(request.app.state, "view_engine", None)
    if engine is None:
        logger.error("View engine requested before startup completed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="View engine not initialized",
        )
    return engine


def get_token_registry(request: Request) -> TokenRegistry:
    """Dependency for getting the anti-forgery token registry.

    Raises:
        HTTPException: If the registry is not available.
    """
    registry = getattr(request.app.state, "token_registry", None)
    if registry is None:
        logger.error("Token registry requested before startup completed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token registry not initialized",
        )
    return registry
