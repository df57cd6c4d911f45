"""Figma document node model.

Only the fields the schema pipeline reads are typed; everything else the
API returns (bounds, constraints, effects, ...) is kept as extra data so a
node can be round-tripped back to JSON.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    RECTANGLE = "RECTANGLE"
    TEXT = "TEXT"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"


class DesignNode(BaseModel):
    """One node of a Figma document tree.

    `type` is one of NodeType; kinds outside that set (VECTOR, ELLIPSE,
    SECTION, ...) are kept as their raw string. `characters` is meaningful
    for TEXT nodes only. Fills and strokes are Figma paint dicts, untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: str
    name: str = ""
    type: Union[NodeType, str] = Field(..., union_mode="left_to_right")
    children: Optional[List["DesignNode"]] = None
    characters: Optional[str] = None
    fills: Optional[List[Dict[str, Any]]] = None
    strokes: Optional[List[Dict[str, Any]]] = None
    scroll_behavior: Optional[str] = Field(None, alias="scrollBehavior")

    @property
    def kind(self) -> str:
        """Node type as a plain string (enum value or raw)."""
        return self.type.value if isinstance(self.type, NodeType) else str(self.type)

    @property
    def child_count(self) -> int:
        return len(self.children or [])


DesignNode.model_rebuild()


def find_node(root: DesignNode, node_id: str) -> Optional[DesignNode]:
    """Depth-first search for a node by id (root included)."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.id == node_id:
            return node
        stack.extend(reversed(node.children or []))
    return None


def list_frames(document: DesignNode) -> List[Dict[str, Any]]:
    """Pages of a document with their top-level children, for browsing.

    Returns [{"id", "name", "frames": [{"id", "name", "type", "child_count"}]}].
    """
    pages = []
    for page in document.children or []:
        frames = [
            {
                "id": child.id,
                "name": child.name,
                "type": child.kind,
                "child_count": child.child_count,
            }
            for child in page.children or []
        ]
        pages.append({"id": page.id, "name": page.name, "frames": frames})
    return pages
