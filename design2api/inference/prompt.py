"""Schema inference prompt templates.

Input: frame name + ComponentSummary list (+ optional free-text context)
Output: a single user-prompt string asking for an example API response
        envelope that would populate the frame.

Pure formatting: no validation, no failure modes.
"""

from __future__ import annotations

import json
from typing import Optional, Sequence

from .summarizer import ComponentSummary

SCHEMA_SYSTEM_PROMPT = """\
You are an expert API designer specializing in RESTful APIs and JSON schema design.
Your task is to analyze UI components and generate appropriate API response structures.
Always maintain consistency in naming and data structures.
Consider both frontend requirements and backend feasibility.
Focus on creating practical, implementation-ready API responses."""

GENERATION_RULES = """\
Requirements:
1. Generate a JSON response that would populate this UI frame
2. Follow these rules:
   - Use camelCase for property names
   - Text fields should have appropriate string values
   - Buttons should have associated actions/states
   - Lists should have array structures
   - Images should have URLs and alt texts
   - Forms should have input field structures
   - Include proper data types (string, number, boolean, array, object)
   - Add proper validation rules where applicable (e.g., required fields)
3. Consider the frame's purpose:
   - If it's a list view, generate array of items
   - If it's a detail view, generate single object
   - If it's a form, generate field structure
   - If it's a dashboard, generate statistics/metrics
4. Include these in the response:
   - HTTP status code (200 for success)
   - Success flag (true for success case)
   - Timestamps in ISO 8601 format
   - Pagination info for lists (page, limit, total)
   - Proper error handling structure"""

RESPONSE_FORMAT = """\
Response Format:
{
  "status": number,
  "success": boolean,
  "data": {
    // Generated data structure here
  },
  "metadata": {
    "timestamp": string,
    "pagination"?: {
      "page": number,
      "limit": number,
      "total": number
    }
  }
}"""


def render_components(components: Sequence[ComponentSummary]) -> str:
    return json.dumps(
        [c.to_prompt_dict() for c in components], indent=2, ensure_ascii=False
    )


def build_schema_prompt(
    frame_name: str,
    components: Sequence[ComponentSummary],
    additional_context: Optional[str] = None,
) -> str:
    """Build the user prompt for one frame. Deterministic for equal inputs."""
    parts = [
        "As an API designer, analyze this Figma UI frame and generate appropriate API response JSON.",
        "",
        f'Frame Name: "{frame_name}"',
        "",
        "UI Components:",
        render_components(components),
        "",
    ]
    if additional_context:
        parts.extend([f"Context: {additional_context}", ""])
    parts.extend([
        GENERATION_RULES,
        "",
        RESPONSE_FORMAT,
        "",
        "Consider the visual hierarchy and relationships between components "
        "when generating the data structure.",
        "Respond ONLY with the JSON, no explanations or additional text.",
    ])
    return "\n".join(parts)
