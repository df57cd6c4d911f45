"""Shared LLM response helpers - code-fence stripping before JSON parsing."""

import json
import logging
import re
from typing import Any

logger = logging.getLogger("design2api.inference.llm")

EMPTY_OBJECT_TEXT = "{}"

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


def strip_code_fences(raw: str) -> str:
    """Remove markdown code-fence markers (``` / ```json) and surrounding blanks."""
    return _FENCE_RE.sub("", raw).strip()


def parse_llm_json(raw: str, caller: str = "LLM") -> Any:
    """Parse JSON from an LLM response after stripping code fences.

    Malformed JSON is logged and re-raised as json.JSONDecodeError; there is
    no brace-hunting fallback.
    """
    text = strip_code_fences(raw or EMPTY_OBJECT_TEXT)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.error("%s: JSON parse error, raw[:500]: %s", caller, text[:500])
        raise
