"""Design browsing endpoints - pages, frame previews, cached frame schemas.

This is the session flow of the browser UI, served from the backend:

    select frame → image (image cache / Figma render)
                 → schema on request (schema cache / summarize → prompt → model)

Credentials come from the encrypted settings cookie, falling back to the
environment defaults. Both caches live in the local key-value store and
expire entries one hour after they were written.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.dependencies import get_credentials, get_storage
from app.repositories.local_storage import LocalStorageRepository, load_cache, save_cache
from app.routes.schema import generate_or_http_error
from design2api import settings
from design2api.credentials import Credentials
from design2api.integrations.figma_client import (
    FigmaClient,
    FigmaClientError,
    FigmaErrorKind,
    describe_figma_error,
)
from design2api.integrations.figma_types import DesignNode, list_frames

logger = logging.getLogger("design2api.routes.design")

router = APIRouter(prefix="/api/design", tags=["design"])

_STATUS_BY_KIND = {
    FigmaErrorKind.CREDENTIALS_MISSING: 400,
    FigmaErrorKind.UNAUTHORIZED: 401,
    FigmaErrorKind.NOT_FOUND: 404,
}


# --- Schemas ---


class FrameItem(BaseModel):
    id: str
    name: str
    type: str
    child_count: int = 0


class PageItem(BaseModel):
    id: str
    name: str
    frames: List[FrameItem] = Field(default_factory=list)


class PagesResponse(BaseModel):
    """Response for GET /api/design/pages."""

    file_id: str
    file_name: str
    pages: List[PageItem] = Field(default_factory=list)


class FrameImageResponse(BaseModel):
    """Response for GET /api/design/frames/{node_id}/image."""

    node_id: str
    url: Optional[str] = None
    cached: bool = False


class FrameSchemaRequest(BaseModel):
    """Optional body for POST /api/design/frames/{node_id}/schema."""

    additional_context: Optional[str] = Field(None, alias="additionalContext")


class FrameSchemaResponse(BaseModel):
    """Response for POST /api/design/frames/{node_id}/schema."""

    node_id: str
    frame_name: str = ""
    cached: bool = False
    schema_: Dict[str, Any] = Field(..., alias="schema", serialization_alias="schema")


def _figma_http_error(e: FigmaClientError) -> HTTPException:
    status = _STATUS_BY_KIND.get(e.kind, 502)
    logger.warning(f"Figma request failed ({e.kind.value}, status={e.status_code}): {e}")
    return HTTPException(status_code=status, detail=describe_figma_error(e))


# --- Endpoints ---


@router.get("/pages", response_model=PagesResponse)
async def list_pages(credentials: Credentials = Depends(get_credentials)):
    """Pages of the configured file with their top-level frames."""
    async with FigmaClient(credentials) as client:
        try:
            data = await client.get_file()
        except FigmaClientError as e:
            raise _figma_http_error(e)

    document = DesignNode.model_validate(data.get("document", {}))
    return PagesResponse(
        file_id=credentials.figma_file_id,
        file_name=data.get("name", ""),
        pages=[PageItem(**page) for page in list_frames(document)],
    )


@router.get("/frames/{node_id}/image", response_model=FrameImageResponse)
async def get_frame_image(
    node_id: str,
    credentials: Credentials = Depends(get_credentials),
    storage: LocalStorageRepository = Depends(get_storage),
):
    """Rendered PNG URL for a frame, served from the image cache when fresh."""
    cache = await load_cache(storage, settings.IMAGE_CACHE_KEY, "url")
    cached_url = cache.get(node_id)
    if cached_url is not None:
        return FrameImageResponse(node_id=node_id, url=cached_url, cached=True)

    async with FigmaClient(credentials) as client:
        try:
            url = await client.get_image(node_id)
        except FigmaClientError as e:
            raise _figma_http_error(e)

    if url:
        cache.set(node_id, url)
        await save_cache(storage, settings.IMAGE_CACHE_KEY, cache)
    return FrameImageResponse(node_id=node_id, url=url, cached=False)


@router.post("/frames/{node_id}/schema", response_model=FrameSchemaResponse)
async def generate_frame_schema(
    node_id: str,
    payload: Optional[FrameSchemaRequest] = None,
    refresh: bool = False,
    credentials: Credentials = Depends(get_credentials),
    storage: LocalStorageRepository = Depends(get_storage),
):
    """Generated response envelope for a frame, served from the schema cache when fresh.

    refresh=true skips the cache lookup; the fresh result still overwrites it.
    """
    cache = await load_cache(storage, settings.SCHEMA_CACHE_KEY, "schema")
    if not refresh:
        cached_schema = cache.get(node_id)
        if cached_schema is not None:
            return FrameSchemaResponse(node_id=node_id, cached=True, schema=cached_schema)

    if not credentials.openai_api_key:
        raise HTTPException(status_code=400, detail="OpenAI API key is required")

    async with FigmaClient(credentials) as client:
        try:
            frame = await client.get_node(node_id)
        except FigmaClientError as e:
            raise _figma_http_error(e)

    result = await generate_or_http_error(
        credentials.openai_api_key,
        frame.name,
        frame.children or [],
        payload.additional_context if payload else None,
    )
    cache.set(node_id, result)
    await save_cache(storage, settings.SCHEMA_CACHE_KEY, cache)
    return FrameSchemaResponse(
        node_id=node_id, frame_name=frame.name, cached=False, schema=result
    )
