"""FastAPI routers and dependencies."""

from viewforge.api.antiforgery import router as antiforgery_router
from viewforge.api.deps import get_token_registry, get_view_engine
from viewforge.api.views import router as views_router

__all__ = [
    "antiforgery_router",
    "get_token_registry",
    "get_view_engine",
    "views_router",
]
