"""Pydantic models for analytics records (.jsonl, one record per line)."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, computed_field

GRAPH_ANALYTICS_TAG = "tyk-graph-analytics"

# A response path element: a field name or a non-negative list index, never coerced.
PathSegment = Union[StrictStr, Annotated[StrictInt, Field(ge=0)]]


class Header(BaseModel):
    name: str
    value: str


class AnalyticsRecord(BaseModel):
    """One captured API exchange, as produced by the ingestion layer."""

    model_config = ConfigDict(frozen=True)

    api_id: str = ""
    api_name: str = ""
    org_id: str = ""
    host: str = ""
    path: str = ""
    raw_path: str = ""
    method: str = ""
    response_code: int = 0
    content_length: int = 0
    user_agent: str = ""
    ip_address: str = ""
    request_time: int = 0  # ms
    timestamp: datetime
    raw_request: str = ""  # base64 raw HTTP/1.1 request
    raw_response: str = ""  # base64 raw HTTP/1.1 response
    tags: list[str] = Field(default_factory=list)
    api_schema: str = ""  # base64 SDL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def day(self) -> int:
        return self.timestamp.day

    @computed_field  # type: ignore[prop-decorator]
    @property
    def month(self) -> int:
        return self.timestamp.month

    @computed_field  # type: ignore[prop-decorator]
    @property
    def year(self) -> int:
        return self.timestamp.year

    @computed_field  # type: ignore[prop-decorator]
    @property
    def hour(self) -> int:
        return self.timestamp.hour

    def is_graph_record(self) -> bool:
        """Whether the record was tagged upstream as a GraphQL call."""
        return GRAPH_ANALYTICS_TAG in self.tags


class GraphError(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = ""
    path: list[PathSegment] = Field(default_factory=list)


class GraphRecord(AnalyticsRecord):
    """An AnalyticsRecord enriched with the GraphQL operation it carried."""

    operation_type: str = ""  # "query" | "mutation" | "subscription"
    types: dict[str, list[str]] = Field(default_factory=dict)
    variables: str = ""  # base64 canonical JSON, empty when absent
    has_errors: bool = False
    errors: list[GraphError] = Field(default_factory=list)
