"""Deterministic base schema from a node tree (no model call).

FRAME nodes become objects keyed by their children's sanitized names,
TEXT nodes become strings, RECTANGLE nodes become button/image-like
objects, and everything else an opaque object.
"""

from __future__ import annotations

import re
from typing import Dict, Literal, Optional

from pydantic import BaseModel

from design2api.integrations.figma_types import DesignNode, NodeType

SchemaType = Literal["string", "number", "boolean", "array", "object"]

_SEPARATOR_RUN_RE = re.compile(r"[^a-zA-Z0-9]+(.)")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")


class APISchema(BaseModel):
    name: str
    type: SchemaType
    description: Optional[str] = None
    required: Optional[bool] = None
    items: Optional["APISchema"] = None
    properties: Optional[Dict[str, "APISchema"]] = None


APISchema.model_rebuild()


def sanitize_name(name: str) -> str:
    """camelCase identifier from a layer name ("Submit Button" -> "submitButton")."""
    lowered = name.lower()
    camel = _SEPARATOR_RUN_RE.sub(lambda m: m.group(1).upper(), lowered)
    return _NON_ALNUM_RE.sub("", camel)


def generate_base_schema(node: DesignNode) -> APISchema:
    if node.type == NodeType.FRAME:
        return _frame_schema(node)
    if node.type == NodeType.TEXT:
        return _text_schema(node)
    if node.type == NodeType.RECTANGLE:
        return _rectangle_schema(node)
    return APISchema(
        name=sanitize_name(node.name),
        type="object",
        description=f"Generated from {node.kind}",
    )


def _frame_schema(node: DesignNode) -> APISchema:
    properties: Dict[str, APISchema] = {}
    for child in node.children or []:
        # Later siblings win on a sanitized-name collision
        properties[sanitize_name(child.name)] = generate_base_schema(child)
    return APISchema(
        name=sanitize_name(node.name),
        type="object",
        properties=properties,
        description=f"API schema for {node.name}",
    )


def _text_schema(node: DesignNode) -> APISchema:
    return APISchema(
        name=sanitize_name(node.name),
        type="string",
        description=node.characters or f"Text field from {node.name}",
    )


def _rectangle_schema(node: DesignNode) -> APISchema:
    return APISchema(
        name=sanitize_name(node.name),
        type="object",
        properties={
            "type": APISchema(
                name="type", type="string", description="Type of the element (button/image)"
            ),
            "action": APISchema(name="action", type="string", description="Action to perform"),
        },
    )
