"""Error taxonomy for GraphQL record extraction.

Every fatal failure is an ``ExtractionError`` naming the stage that failed,
so callers can log or count failures per stage without string matching.
"""

from __future__ import annotations

from typing import Any


class ExtractionError(Exception):
    """Raised when a record cannot be converted into a GraphRecord."""

    def __init__(
        self,
        message: str,
        stage: str = "unknown",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.details: dict[str, Any] = details or {}


class DecodeError(ExtractionError):
    """A base64 payload (raw message or schema) is not valid base64."""


class MalformedMessageError(ExtractionError):
    """Raw HTTP framing is inconsistent: missing delimiter or bad Content-Length."""


class ParseError(ExtractionError):
    """A request or response body is not a JSON object."""


class NotGraphQLError(ExtractionError):
    """A record expected to carry a GraphQL operation does not."""


class SchemaResolutionError(ExtractionError):
    """A field or type could not be resolved against the schema (strict policy)."""
