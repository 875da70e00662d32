"""Interpret the JSON bodies of a GraphQL exchange."""

from __future__ import annotations

import json
from typing import Any, cast

from graph_analytics.commands.enrich.types import GraphQLRequest, GraphQLResponse
from graph_analytics.errors import ParseError


def parse_request_body(body: bytes) -> GraphQLRequest:
    """Parse a ``{query, variables, operationName}`` request body.

    ``query`` is kept only when it is a string; deciding whether a missing
    query is fatal is left to the caller. An absent ``variables`` key is
    reported as ``has_variables=False`` so it is never confused with ``{}``.
    """
    obj = _load_object(body, "request")
    query = obj.get("query")
    operation_name = obj.get("operationName")
    return GraphQLRequest(
        query=query if isinstance(query, str) else None,
        variables=obj.get("variables"),
        has_variables="variables" in obj,
        operation_name=operation_name if isinstance(operation_name, str) else None,
    )


def parse_response_body(body: bytes) -> GraphQLResponse:
    """Parse a ``{data, errors}`` response body."""
    obj = _load_object(body, "response")
    return GraphQLResponse(data=obj.get("data"), errors=obj.get("errors"))


def _load_object(body: bytes, stage: str) -> dict[str, Any]:
    try:
        parsed: Any = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise ParseError(
            f"{stage} body is not valid JSON: {e}", stage=stage, details={"size": len(body)}
        ) from e
    if not isinstance(parsed, dict):
        raise ParseError(
            f"{stage} body is not a JSON object (got {type(parsed).__name__})",
            stage=stage,
        )
    return cast(dict[str, Any], parsed)
