"""Shared test fixtures for graph-analytics tests."""

from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from typing import Any

import pytest

from graph_analytics.formats.analytics_record import GRAPH_ANALYTICS_TAG, AnalyticsRecord

REQUEST_TEMPLATE = (
    "POST / HTTP/1.1\r\nHost: localhost:8281\r\nUser-Agent: test-agent\r\n"
    "Content-Length: {length}\r\n\r\n{body}"
)
RESPONSE_TEMPLATE = (
    "HTTP/0.0 200 OK\r\nContent-Length: {length}\r\nConnection: close\r\n"
    "Content-Type: application/json\r\n\r\n{body}"
)

SAMPLE_SCHEMA = """
type Query {
  characters(filter: FilterCharacter, page: Int): Characters
  listCharacters(): [Characters]!
}
input FilterCharacter {
  name: String
  status: String
  species: String
  type: String
  gender: String! = "M"
}
type Characters {
  info: Info
  results: [Character]
}
type Info {
  count: Int
  next: Int
  pages: Int
  prev: Int
}
type Character {
  gender: String
  id: ID
  name: String
}
"""

CHARACTERS_QUERY = "query{\n  characters(filter: {\n    \n  }){\n    info{\n      count\n    }\n  }\n}"
LIST_CHARACTERS_QUERY = "query{\n  listCharacters(){\n    info{\n      count\n    }\n  }\n}"
COUNT_RESPONSE = '{"data":{"characters":{"info":{"count":758}}}}'


def b64(text: str | bytes) -> str:
    data = text.encode("utf-8") if isinstance(text, str) else text
    return base64.b64encode(data).decode("ascii")


def raw_request(body: str) -> str:
    """Base64 raw HTTP request framing ``body`` with its Content-Length."""
    return b64(REQUEST_TEMPLATE.format(length=len(body.encode()), body=body))


def raw_response(body: str) -> str:
    """Base64 raw HTTP response framing ``body`` with its Content-Length."""
    return b64(RESPONSE_TEMPLATE.format(length=len(body.encode()), body=body))


def gql_body(query: str, variables: Any = None, **extra: Any) -> str:
    """JSON request body; ``variables`` is only included when not None."""
    body: dict[str, Any] = {"query": query}
    if variables is not None:
        body["variables"] = variables
    body.update(extra)
    return json.dumps(body)


def make_record(
    request_body: str = "",
    response_body: str = COUNT_RESPONSE,
    schema: str = SAMPLE_SCHEMA,
    tags: list[str] | None = None,
    **overrides: Any,
) -> AnalyticsRecord:
    """Helper to create a tagged AnalyticsRecord with minimal boilerplate."""
    fields: dict[str, Any] = dict(
        method="POST",
        host="localhost:8281",
        response_code=200,
        path="/",
        raw_path="/",
        timestamp=datetime(2022, 1, 1, 0, 0, 0, tzinfo=timezone.utc),
        api_name="test-api",
        api_id="test-api",
        api_schema=b64(schema),
        raw_request=raw_request(request_body or gql_body(CHARACTERS_QUERY)),
        raw_response=raw_response(response_body),
        tags=[GRAPH_ANALYTICS_TAG] if tags is None else tags,
    )
    fields.update(overrides)
    return AnalyticsRecord(**fields)


@pytest.fixture
def sample_record() -> AnalyticsRecord:
    return make_record()
