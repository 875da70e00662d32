"""Extractor configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

RESOLUTION_ENV_VAR = "GRAPH_ANALYTICS_RESOLUTION"


class ResolutionPolicy(str, Enum):
    """What to do when a selected field cannot be resolved against the schema.

    ``lenient`` skips the gap and keeps the partial field-usage map;
    ``strict`` fails the conversion with a SchemaResolutionError.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class ExtractorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    resolution: ResolutionPolicy = ResolutionPolicy.LENIENT


DEFAULT_CONFIG = ExtractorConfig()
