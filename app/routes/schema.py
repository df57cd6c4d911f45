"""Schema generation endpoints.

POST /api/generate-schema       frame components → generated response envelope (model)
POST /api/generate-base-schema  node tree → deterministic base schema (no model)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import APIRouter, HTTPException
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from design2api.inference import (
    EnvelopeValidationError,
    SchemaInferenceEngine,
)
from design2api.inference.base_schema import APISchema, generate_base_schema
from design2api.integrations.figma_types import DesignNode

logger = logging.getLogger("design2api.routes.schema")

router = APIRouter(prefix="/api", tags=["schema"])


class GenerateSchemaRequest(BaseModel):
    """Body of POST /api/generate-schema (camelCase, as sent by the browser)."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    frame_name: str = Field(..., alias="frameName")
    components: List[DesignNode] = Field(default_factory=list)
    model_api_key: str = Field(
        "",
        validation_alias=AliasChoices("modelApiKey", "openaiApiKey", "model_api_key"),
    )
    additional_context: Optional[str] = Field(None, alias="additionalContext")


async def generate_or_http_error(
    api_key: str,
    frame_name: str,
    components: Sequence[DesignNode],
    additional_context: Optional[str] = None,
) -> Dict[str, Any]:
    """Run the inference pipeline and translate its failures into HTTP errors."""
    if not api_key:
        raise HTTPException(status_code=400, detail="OpenAI API key is required")

    engine = SchemaInferenceEngine(api_key=api_key)
    try:
        result = await engine.generate_response_schema(
            frame_name, components, additional_context=additional_context
        )
    except json.JSONDecodeError as e:
        raise HTTPException(
            status_code=500, detail=f"Model returned malformed JSON: {e.msg}"
        )
    except EnvelopeValidationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating schema: {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate API schema")
    finally:
        await engine.close()
    return result.to_dict()


@router.post("/generate-schema")
async def generate_schema(payload: GenerateSchemaRequest):
    """Generate an example API response envelope for a frame's components.

    Usage:
        POST /api/generate-schema
        { "frameName": "LoginForm", "components": [...], "modelApiKey": "sk-..." }
    """
    return await generate_or_http_error(
        payload.model_api_key,
        payload.frame_name,
        payload.components,
        payload.additional_context,
    )


@router.post(
    "/generate-base-schema",
    response_model=APISchema,
    response_model_exclude_none=True,
)
async def generate_base_schema_endpoint(node: DesignNode):
    """Deterministic schema skeleton derived from a node tree."""
    return generate_base_schema(node)
