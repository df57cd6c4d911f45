"""Frame-to-schema inference pipeline.

summarize -> build prompt -> call model -> strip fences -> parse -> validate
"""

from .engine import InferenceNotInitializedError, ModelConfig, SchemaInferenceEngine
from .envelope import EnvelopeValidationError, SchemaResponse, validate_envelope
from .prompt import build_schema_prompt
from .summarizer import ComponentSummary, summarize_components, summarize_frame

__all__ = [
    "ComponentSummary",
    "EnvelopeValidationError",
    "InferenceNotInitializedError",
    "ModelConfig",
    "SchemaInferenceEngine",
    "SchemaResponse",
    "build_schema_prompt",
    "summarize_components",
    "summarize_frame",
    "validate_envelope",
]
