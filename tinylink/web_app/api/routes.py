"""API routes implementation."""

from typing import List, Optional

from fastapi import APIRouter, Request, Query, status

from .schemas import (
    CreateLinkRequest,
    LinkResponse,
    DeleteResponse,
    ErrorResponse,
)
from ...database.models import Link
from ...common.url_builder import build_base_url, build_short_url

router = APIRouter()


def link_response(request: Request, link: Link) -> LinkResponse:
    """Serialize a link with its public short URL."""
    config = request.app.state.config

    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )

    return LinkResponse(
        id=link.id,
        code=link.code,
        target=link.target,
        clicks=link.clicks,
        last_clicked=link.last_clicked_at,
        created_at=link.created_at,
        short_url=build_short_url(link.code, base_url, config.path_prefix),
    )


@router.get(
    "/links",
    response_model=List[LinkResponse],
    responses={
        503: {"model": ErrorResponse, "description": "Link store unavailable"},
    },
    summary="List links",
    description="List all links, newest first. Optionally filter by code or target substring.",
)
async def list_links(
    request: Request,
    q: Optional[str] = Query(None, description="Case-insensitive filter on code or target"),
):
    """List links."""
    registry = request.app.state.registry

    listing = await registry.list_links(q)

    return [link_response(request, link) for link in listing]


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid target or code"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        503: {"model": ErrorResponse, "description": "Link store unavailable"},
    },
    summary="Create link",
    description="Create a short link for a target URL under a caller-chosen code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    registry = request.app.state.registry

    link = await registry.create_link(target=body.target, code=body.code)

    return link_response(request, link)


@router.get(
    "/links/{code}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get link",
    description="Get a link including its click statistics.",
)
async def get_link(request: Request, code: str):
    """Get a link."""
    registry = request.app.state.registry

    link = await registry.get_link(code)

    return link_response(request, link)


@router.delete(
    "/links/{code}",
    response_model=DeleteResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Delete link",
)
async def delete_link(request: Request, code: str):
    """Delete a link."""
    registry = request.app.state.registry

    await registry.delete_link(code)

    return DeleteResponse(success=True)
