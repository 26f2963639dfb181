"""Redirect and health routes."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from ... import __version__
from ..api.schemas import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse, include_in_schema=False)
async def healthz(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    store = request.app.state.store

    healthy = await store.health_check()

    body = HealthResponse(
        ok=healthy,
        version=__version__,
        name="tinylink",
        store="healthy" if healthy else "unhealthy",
    )
    return JSONResponse(
        content=body.model_dump(),
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@router.get("/{code}", include_in_schema=False)
async def redirect_to_target(request: Request, code: str):
    """Record the click and redirect to the link target.

    Unknown codes raise NotFoundError, answered with 404 and no redirect.
    """
    registry = request.app.state.registry

    link = await registry.resolve_and_record_click(code)

    # 302 so browsers keep coming back through us and every visit is counted
    return RedirectResponse(url=link.target, status_code=status.HTTP_302_FOUND)
