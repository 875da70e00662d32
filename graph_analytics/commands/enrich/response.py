"""Extract GraphQL errors from a parsed response body."""

from __future__ import annotations

import json
import logging
from typing import Any, cast

from graph_analytics.commands.enrich.types import GraphQLResponse
from graph_analytics.formats.analytics_record import GraphError, PathSegment

logger = logging.getLogger(__name__)


def extract_errors(response: GraphQLResponse) -> tuple[bool, list[GraphError]]:
    """Return ``(has_errors, errors)`` from the top-level ``errors`` array.

    An absent, non-list or empty ``errors`` value means no errors.
    """
    raw_errors: Any = response.errors
    if not isinstance(raw_errors, list) or not raw_errors:
        return False, []

    errors = [_to_graph_error(entry) for entry in cast(list[Any], raw_errors)]
    return True, errors


def _to_graph_error(entry: Any) -> GraphError:
    if isinstance(entry, str):
        return GraphError(message=entry)
    if not isinstance(entry, dict):
        logger.debug("Ignoring non-object error entry: %r", entry)
        return GraphError()

    obj = cast(dict[str, Any], entry)
    message: Any = obj.get("message")
    if message is None:
        message = ""
    elif not isinstance(message, str):
        message = json.dumps(message, sort_keys=True)

    raw_path: Any = obj.get("path")
    path: list[PathSegment] = []
    if isinstance(raw_path, list):
        for segment in cast(list[Any], raw_path):
            converted = _path_segment(segment)
            if converted is None:
                logger.debug("Dropping unsupported path segment: %r", segment)
                continue
            path.append(converted)

    return GraphError(message=message, path=path)


def _path_segment(segment: Any) -> PathSegment | None:
    """Keep field names as str and list indices as non-negative int."""
    if isinstance(segment, bool):
        return None
    if isinstance(segment, str):
        return segment
    if isinstance(segment, float) and segment.is_integer():
        segment = int(segment)
    if isinstance(segment, int) and segment >= 0:
        return segment
    return None
