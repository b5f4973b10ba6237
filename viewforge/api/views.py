"""View API routes.

Renders compiled views, forces recompilation of a single view and exposes
the persisted cache document.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from viewforge.api.deps import get_view_engine
from viewforge.api.schemas import CompileResponse
from viewforge.core.exceptions import TemplateNotFoundError
from viewforge.engine.view_engine import ViewEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["views"])


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/views/{logical_name:path}/compile",
    response_model=CompileResponse,
    status_code=status.HTTP_200_OK,
)
def compile_view(
    logical_name: str,
    engine: ViewEngine = Depends(get_view_engine),
) -> CompileResponse:
    """Recompile one view from its current template source.

    Args:
        logical_name: The view to compile, e.g. ``App/Index``.
        engine: The running view engine.

    Returns:
        CompileResponse with the fingerprint and dependencies of the view.

    Raises:
        HTTPException: 404 if the view or a layout/partial it references is unknown.
    """
    try:
        view = engine.compile(logical_name)
    except TemplateNotFoundError as e:
        logger.warning(f"Compile of {logical_name} failed: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return CompileResponse(
        logical_name=view.logical_name,
        content_fingerprint=view.content_fingerprint,
        dependencies=list(engine.dependencies.get(logical_name, ())),
    )


@router.get("/views/{logical_name:path}", response_class=HTMLResponse)
def render_view(
    logical_name: str,
    request: Request,
    engine: ViewEngine = Depends(get_view_engine),
) -> HTMLResponse:
    """Render a view, using the query string parameters as tag values.

    Args:
        logical_name: The view to render, e.g. ``App/Index``.
        request: The incoming request.
        engine: The running view engine.

    Returns:
        The rendered page.

    Raises:
        HTTPException: 404 if the view is not compiled.
    """
    tags = dict(request.query_params)
    page = engine.render_view(logical_name, tags)

    if page is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"View not found: {logical_name}",
        )

    return HTMLResponse(content=page)


@router.get("/cache", response_class=PlainTextResponse)
def get_cache(engine: ViewEngine = Depends(get_view_engine)) -> PlainTextResponse:
    """Return the serialized view cache."""
    return PlainTextResponse(content=engine.get_cache(), media_type="application/json")
