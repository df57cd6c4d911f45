"""Schema inference engine - frame components to a generated API response.

Delegates to an OpenAI chat-completion model: one system message fixing the
assistant's role, one user message carrying the built prompt. The reply is
fence-stripped, parsed and validated against the response envelope.

Failure policy:
- no API key set            → InferenceNotInitializedError
- upstream errors (network, auth, rate limit) → openai exceptions, unmodified
- malformed JSON            → json.JSONDecodeError, unmodified
- wrong envelope shape      → EnvelopeValidationError
Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from design2api import settings
from design2api.integrations.figma_types import DesignNode

from .envelope import SchemaResponse, validate_envelope
from .llm_utils import EMPTY_OBJECT_TEXT, parse_llm_json
from .prompt import SCHEMA_SYSTEM_PROMPT, build_schema_prompt
from .summarizer import summarize_components

logger = logging.getLogger("design2api.inference.engine")


class InferenceNotInitializedError(RuntimeError):
    """Raised when the engine is used before an API key is set."""


@dataclass(frozen=True)
class ModelConfig:
    model: str = settings.SCHEMA_MODEL
    temperature: float = settings.SCHEMA_TEMPERATURE
    # Carried for configuration parity only; no code path retries on it
    max_retries: int = settings.SCHEMA_MAX_RETRIES
    force_json_object: bool = settings.SCHEMA_FORCE_JSON_OBJECT


class SchemaInferenceEngine:
    """Generates example API responses for Figma frames.

    Args:
        api_key: OpenAI key. May be supplied later via set_api_key().
        config: Model settings, fixed for the engine's lifetime.
    """

    def __init__(self, api_key: Optional[str] = None, config: Optional[ModelConfig] = None):
        self.config = config or ModelConfig()
        self._api_key = api_key or ""
        self._client: Optional[AsyncOpenAI] = None

    @property
    def initialized(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, api_key: str) -> None:
        if not api_key:
            raise ValueError("OpenAI API key is required")
        self._api_key = api_key
        self._client = None

    def _get_client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise InferenceNotInitializedError(
                "OpenAI client is not initialized. Please set API key first."
            )
        if self._client is None:
            # max_retries=0: the SDK's built-in retries stay off as well
            self._client = AsyncOpenAI(api_key=self._api_key, max_retries=0)
        return self._client

    def build_messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SCHEMA_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    async def complete(self, prompt: str) -> str:
        """Send the two-message exchange and return the first choice's text."""
        client = self._get_client()
        request: Dict[str, Any] = {
            "model": self.config.model,
            "messages": self.build_messages(prompt),
            "temperature": self.config.temperature,
        }
        if self.config.force_json_object:
            request["response_format"] = {"type": "json_object"}

        response = await client.chat.completions.create(**request)

        content = None
        if response.choices:
            content = response.choices[0].message.content
        return content or EMPTY_OBJECT_TEXT

    async def generate_from_prompt(self, prompt: str, frame_name: str = "") -> SchemaResponse:
        try:
            text = await self.complete(prompt)
            parsed = parse_llm_json(text, caller="SchemaInferenceEngine")
            return validate_envelope(parsed)
        except Exception as e:
            logger.error(f"Failed to generate response schema for {frame_name!r}: {e}")
            raise

    async def generate_response_schema(
        self,
        frame_name: str,
        components: Sequence[DesignNode],
        additional_context: Optional[str] = None,
    ) -> SchemaResponse:
        """Summarize components, build the prompt, infer and validate."""
        summaries = summarize_components(components)
        prompt = build_schema_prompt(frame_name, summaries, additional_context)
        logger.info(
            f"generate_response_schema: frame={frame_name!r}, components={len(summaries)}, "
            f"model={self.config.model}"
        )
        return await self.generate_from_prompt(prompt, frame_name=frame_name)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
