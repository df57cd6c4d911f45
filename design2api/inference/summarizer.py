"""Node summarizer - compact, serializable view of a frame's direct children.

Only one level is summarized; grandchildren contribute their count only.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from design2api.integrations.figma_types import DesignNode


class ComponentProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fills: Optional[List[Dict[str, Any]]] = None
    strokes: Optional[List[Dict[str, Any]]] = None
    scroll_behavior: Optional[str] = Field(None, alias="scrollBehavior")


class ComponentSummary(BaseModel):
    """Model input for one component. Recomputed per call, never stored."""

    name: str
    type: str
    text: str = ""
    children: int = 0
    properties: ComponentProperties = Field(default_factory=ComponentProperties)

    def to_prompt_dict(self) -> Dict[str, Any]:
        # Absent properties are omitted, but the properties object is always present
        return {
            "name": self.name,
            "type": self.type,
            "text": self.text,
            "children": self.children,
            "properties": self.properties.model_dump(by_alias=True, exclude_none=True),
        }


def summarize_node(node: DesignNode) -> ComponentSummary:
    return ComponentSummary(
        name=node.name,
        type=node.kind,
        text=node.characters or "",
        children=node.child_count,
        properties=ComponentProperties(
            fills=node.fills,
            strokes=node.strokes,
            scroll_behavior=node.scroll_behavior,
        ),
    )


def summarize_components(components: Sequence[DesignNode]) -> List[ComponentSummary]:
    """One summary per component, same order."""
    return [summarize_node(c) for c in components]


def summarize_frame(frame: DesignNode) -> List[ComponentSummary]:
    """Summaries of a frame's direct children; empty for a leaf."""
    return summarize_components(frame.children or [])
