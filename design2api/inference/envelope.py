"""Response envelope validation.

Checks a parsed model reply against the fixed envelope shape

    {status, success, data, metadata: {timestamp, pagination?}, error?}

and returns a typed SchemaResponse, or raises EnvelopeValidationError
listing every mismatch. `success` agreeing with a 2xx `status` is a
convention of the generated examples and is not enforced.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, ValidationError, field_validator

# Date with an optional time and UTC offset; seconds may carry a fraction.
# Extended (2024-01-01T00:00:00Z) and basic (20240101T000000Z) forms.
_ISO_8601_RE = re.compile(
    r"\d{4}-?(0[1-9]|1[0-2])-?(0[1-9]|[12]\d|3[01])"
    r"(?:[T ]([01]\d|2[0-4])(?::?[0-5]\d(?::?([0-5]\d|60)(?:[.,]\d+)?)?)?"
    r"(?:Z|[+-](?:[01]\d|2[0-3])(?::?[0-5]\d)?)?)?"
)


class EnvelopeValidationError(ValueError):
    """Raised when parsed JSON does not match the response envelope."""

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        locations = ", ".join(
            ".".join(str(p) for p in e.get("loc", ())) or "<root>" for e in errors
        )
        super().__init__(f"Model response does not match the envelope: {locations}")


class Pagination(BaseModel):
    page: StrictInt
    limit: StrictInt
    total: StrictInt


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    timestamp: StrictStr
    pagination: Optional[Pagination] = None

    @field_validator("timestamp")
    @classmethod
    def _iso_8601(cls, value: str) -> str:
        if not _ISO_8601_RE.fullmatch(value):
            raise ValueError(f"timestamp is not ISO 8601: {value!r}")
        return value


class SchemaResponse(BaseModel):
    """Typed view of a generated API response example.

    Top-level keys beyond the envelope are kept as extras and returned by
    to_dict() as-is.
    """

    model_config = ConfigDict(extra="allow")

    status: StrictInt
    success: StrictBool
    data: Dict[str, Any]
    metadata: ResponseMetadata
    error: Optional[StrictStr] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; optional keys omitted when absent, `data` untouched."""
        metadata = self.metadata.model_dump(exclude={"pagination"})
        if self.metadata.pagination is not None:
            metadata["pagination"] = self.metadata.pagination.model_dump()
        result: Dict[str, Any] = {
            "status": self.status,
            "success": self.success,
            "data": self.data,
            "metadata": metadata,
        }
        if self.error is not None:
            result["error"] = self.error
        result.update(self.model_extra or {})
        return result


def validate_envelope(payload: Any) -> SchemaResponse:
    """Structural check of a parsed reply; typed result or EnvelopeValidationError."""
    if not isinstance(payload, dict):
        raise EnvelopeValidationError([{
            "loc": (),
            "msg": f"expected a JSON object, got {type(payload).__name__}",
            "type": "dict_type",
        }])
    try:
        return SchemaResponse.model_validate(payload)
    except ValidationError as e:
        errors = [
            {"loc": err["loc"], "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        raise EnvelopeValidationError(errors) from e
